"""
llm/prompt/prompt.py
Prompt templates for contract analysis.
All templates use str.format() placeholders; literal JSON braces are doubled.
"""

# SYSTEM: OCR repair
SYSTEM_OCR_CLEANUP = (
    "You are an expert at fixing OCR errors in legal documents. "
    "Clean up the text while preserving the legal meaning and formatting."
)

# SYSTEM: general contract text cleanup
SYSTEM_CONTRACT_CLEANUP = (
    "You are an expert at cleaning contract text extracted from PDFs. "
    "Fix broken words, merge hard-wrapped lines, remove page headers, footers "
    "and page numbers. Do not summarize, reword or drop any clause. "
    "Return only the cleaned text."
)

# SYSTEM: extraction from raw (possibly scrambled) PDF text
SYSTEM_TEXT_EXTRACTION = (
    "You receive raw text pulled from a PDF contract, possibly out of order "
    "or with layout noise. Reconstruct the readable contract text in reading "
    "order. Return only the text."
)

SYSTEM_CONTRACT_ANALYST = (
    "You are a specialized contract analysis AI that extracts precise and "
    "accurate information from legal documents. Always answer with valid JSON."
)

SECTION_ANALYSIS = (
    "Analyze the following contract section and identify:\n"
    "1. Section title\n"
    "2. Main content\n"
    "3. Importance (1-10)\n"
    "4. Type (revenue, performance, payment, termination, or general)\n\n"
    "Text:\n"
    "{text}\n\n"
    "Respond in JSON format:\n"
    "{{\n"
    '  "title": "string",\n'
    '  "content": "string",\n'
    '  "importance": number,\n'
    '  "type": "string"\n'
    "}}"
)

METADATA_EXTRACTION = (
    "Extract the following metadata from the contract text:\n"
    "1. Contract date\n"
    "2. Parties involved\n"
    "3. Total contract value\n"
    "4. Number of pages/sections\n\n"
    "Text:\n"
    "{text}\n\n"
    "Respond in JSON format:\n"
    "{{\n"
    '  "contract_date": "string",\n'
    '  "parties": ["string"],\n'
    '  "total_value": number,\n'
    '  "page_count": number\n'
    "}}"
)

CLAUSE_ANALYSIS = (
    "Analyze the following contract text and extract relevant clauses for:\n"
    "1. Revenue\n"
    "2. Performance\n"
    "3. Payment\n"
    "4. Termination\n\n"
    "Text:\n"
    "{text}\n\n"
    "For each clause, provide:\n"
    "- text: The actual clause text\n"
    "- confidence: How confident you are this is relevant (0-1)\n\n"
    "Respond in JSON format:\n"
    "{{\n"
    '  "revenue": [{{"text": "string", "confidence": number}}],\n'
    '  "performance": [{{"text": "string", "confidence": number}}],\n'
    '  "payment": [{{"text": "string", "confidence": number}}],\n'
    '  "termination": [{{"text": "string", "confidence": number}}]\n'
    "}}"
)

# SYSTEM: chunk labelling, used by the semantic labeler
SYSTEM_CHUNK_LABELS = (
    "You are an expert at classifying contract clauses. Analyze the text and "
    "identify its type and relevant metadata. Focus on revenue recognition, "
    "performance obligations, payment terms and termination clauses. Respond "
    'in JSON as {"labels": [{"type": "REVENUE_RECOGNITION | '
    'PERFORMANCE_OBLIGATION | PAYMENT_TERMS | TERMINATION", '
    '"confidence": number, "metadata": {}}]}.'
)

SYSTEM_REVENUE_ANALYST = (
    "You are REMY, an expert in complex revenue recognition scenarios under "
    "IFRS 15 and ASC 606. Focus on detailed clause analysis and trigger "
    "identification. Always answer with valid JSON."
)

REVENUE_CLAUSE_ANALYSIS = (
    "As REMY, a revenue recognition expert, analyze this contract with focus on "
    "complex revenue clauses and triggers.\n"
    "Pay special attention to:\n\n"
    "1. Revenue triggers and conditions\n"
    "   - Identify all events/conditions that trigger revenue recognition\n"
    "   - Classify triggers (milestone, usage, time, performance, hybrid, contingent, cumulative)\n"
    "   - Specify measurement criteria and evidence requirements\n"
    "   - Map to specific IFRS 15 steps and ASC 606 requirements\n"
    "   - Evaluate recognition methods (output, input, straight_line, usage_based, milestone_based)\n\n"
    "2. Variable consideration\n"
    "   - Identify bonuses, penalties, incentives, rebates and refunds\n"
    "   - Assess estimation methods and constraints\n\n"
    "3. Performance obligations\n"
    "   - Identify and classify all obligations (distinct, series, combined)\n"
    "   - Determine recognition patterns and link them to triggers\n\n"
    "4. Special considerations\n"
    "   - Financing components, non-cash consideration, contract modifications,\n"
    "     multiple contracts, warranties\n\n"
    "{context}"
    "Contract Text:\n"
    "{text}\n\n"
    "Respond in JSON with the keys: clauses, triggers, variable_consideration,\n"
    "performance_obligations, special_considerations. Each trigger is an object\n"
    "with type, description, conditions (list), measurement and\n"
    "recognition.timing (point_in_time or over_time)."
)

CONTRACT_DATA_EXTRACTION = (
    "Analyze the provided contract text and extract the following information in JSON format.\n\n"
    "Required fields (all fields MUST be included in the response):\n"
    "- name: The title or name of the contract (string)\n"
    "- contract_number: Any contract ID or reference number (string)\n"
    "- client_name: The client or second party name (string)\n"
    "- start_date: The effective or start date (YYYY-MM-DD)\n"
    "- end_date: The termination or end date (YYYY-MM-DD, or null if not found)\n"
    "- value: The total contract value as a number without currency symbols\n"
    "- key_terms: The most important clauses, focusing on payment, delivery and "
    "termination (array of strings, 5 items max)\n"
    "- performance_obligations: Performance obligations identified in the contract "
    "(array of strings, can be empty)\n\n"
    "Contract text:\n"
    "{text}\n\n"
    "Return ONLY the JSON without any explanations or additional text."
)

# SYSTEM: question answering over one contract
SYSTEM_CONTRACT_QA = (
    "You are REMY, a revenue recognition assistant trained on IFRS 15 and "
    "ASC 606. Structure answers around the five-step model and cite the "
    "relevant IFRS 15 / ASC 606 sections."
)

CONTRACT_QUESTION = (
    "Answer the user's question using ONLY the contract below. Identify "
    "performance obligations, transaction price, allocation and timing where "
    "relevant, and show calculations when discussing revenue amounts.\n\n"
    "Contract text:\n"
    "{text}\n\n"
    "User's question: {question} - Please analyze according to IFRS 15/ASC 606 standards"
)

# SYSTEM: named entity recognition
SYSTEM_ENTITY_EXTRACTION = (
    "You are REMY, a contract analysis AI that specializes in named entity "
    "recognition and information extraction from legal documents. Always "
    "answer with valid JSON."
)

CONTRACT_ENTITIES = (
    "Extract all relevant entities from this contract. Return a JSON object "
    "with these keys:\n"
    '- "organizations": [{{"name", "role", "mentions": [{{"text", "context_clause"}}]}}]\n'
    '- "persons": [{{"name", "title", "organization", "role"}}]\n'
    '- "locations": [{{"name", "type" (jurisdiction | performance_location | address | other), "context"}}]\n'
    '- "monetary_values": [{{"amount", "currency", "purpose", "clause"}}]\n'
    '- "dates": [{{"date" (ISO), "description", "significance"}}]\n'
    '- "time_periods": [{{"duration", "unit" (days | weeks | months | years), "purpose", "clause"}}]\n'
    '- "products_services": [{{"name", "description", "quantity", "pricing"}}]\n'
    '- "legal_terms": [{{"type", "description", "clause"}}]\n\n'
    "Contract:\n"
    "{text}"
)

# SYSTEM: obligation analysis
SYSTEM_OBLIGATION_ANALYST = (
    "You are REMY, a contract analysis AI specializing in identifying "
    "obligations, responsibilities and requirements in legal documents. "
    "Always answer with valid JSON."
)

CONTRACT_OBLIGATIONS = (
    "Analyze all obligations, responsibilities and requirements in this "
    "contract. Identify who is obligated to do what, when, and under what "
    "conditions. Return a JSON object with these keys:\n"
    '- "seller_obligations", "buyer_obligations", "mutual_obligations": '
    '[{{"description", "timing", "conditions": [string], "consequences", "clause"}}]\n'
    '- "conditional_clauses": [{{"condition", "consequence", "obligated_party", "clause"}}]\n'
    '- "deliverables": [{{"item", "description", "due_date", "responsible_party", "acceptance_criteria"}}]\n'
    '- "service_performance": [{{"service", "performance_standards": [string], "metrics": [string], "remedies"}}]\n\n'
    "Contract:\n"
    "{text}"
)
