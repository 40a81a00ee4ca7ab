#!/usr/bin/env python3
"""
Contract Analyzer CLI
Analyze PDF contracts, classify clause text and batch-process folders from
the terminal. Every command prints JSON to stdout.
"""

import argparse
import json
import sys
from typing import Any, List, Optional

from dotenv import load_dotenv

load_dotenv()

from ..services.analysis.clause_classifier import ClauseClassifier  # noqa: E402
from ..services.pdf.pdf_orchestrator import PDFOrchestrator  # noqa: E402


def _print_json(data: Any) -> None:
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False, default=str)
    sys.stdout.write("\n")


def cmd_analyze(args: argparse.Namespace) -> int:
    result = PDFOrchestrator().process_contract(
        args.file,
        use_ai=args.ai,
        use_azure=args.azure,
        hierarchical=args.hierarchical,
    )
    _print_json(result.to_dict())
    return 0 if result.success else 1


def cmd_classify(args: argparse.Namespace) -> int:
    classifier = ClauseClassifier()
    _print_json({
        "clauses": [
            {"text": c.text, "type": c.type, "confidence": c.confidence}
            for c in classifier.classify_text(args.text)
        ],
        "counts": classifier.identify_relevant_clauses(args.text).counts(),
    })
    return 0


def cmd_batch(args: argparse.Namespace) -> int:
    results = PDFOrchestrator().process_directory(args.directory, use_ai=args.ai, use_azure=args.azure)
    _print_json([
        {
            "source": r.source,
            "success": r.success,
            "message": r.message,
            "sections": len(r.sections),
            "clauses": r.relevant_clauses.counts(),
            "metadata": r.metadata.to_dict() if r.metadata else None,
        }
        for r in results
    ])
    return 0 if all(r.success for r in results) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="contract-analyzer", description="Contract Analyzer CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze a PDF contract")
    analyze.add_argument("file", help="Path to the PDF file")
    analyze.add_argument("--ai", action="store_true", help="Run LLM cleanup on extracted text")
    analyze.add_argument("--azure", action="store_true", help="Fill metadata with Azure Form Recognizer")
    analyze.add_argument("--hierarchical", action="store_true", help="Nest sections by heading level")
    analyze.set_defaults(func=cmd_analyze)

    classify = sub.add_parser("classify", help="Classify the sentences of a text")
    classify.add_argument("text", help="Contract text")
    classify.set_defaults(func=cmd_classify)

    batch = sub.add_parser("batch", help="Analyze every PDF in a directory")
    batch.add_argument("directory", help="Directory with PDF files")
    batch.add_argument("--ai", action="store_true", help="Run LLM cleanup on extracted text")
    batch.add_argument("--azure", action="store_true", help="Fill metadata with Azure Form Recognizer")
    batch.set_defaults(func=cmd_batch)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
