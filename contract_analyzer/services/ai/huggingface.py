"""
Hugging Face Inference API client.

Clause classification, revenue trigger detection and revenue forecasting
against hosted models. Every failure is logged and re-raised as
ExternalServiceError.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from ...config.settings import settings
from ...utils.errors import ExternalServiceError
from ...utils.http import HttpClient

logger = logging.getLogger(__name__)

SERVICE = "huggingface"
TRIGGER_ENTITIES = ("B-trigger", "I-trigger")


class HuggingFaceInferenceClient:
    """Hosted-model inference over the Hugging Face REST API."""

    def __init__(self, api_key: Optional[str] = None, http_client: Optional[HttpClient] = None):
        self.api_key = api_key or settings.huggingface_api_key
        self.base_url = settings.huggingface_base_url.rstrip("/")
        self.http = http_client or HttpClient()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _infer(self, model: str, payload: Dict[str, Any]) -> Any:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        return self.http.post_json(f"{self.base_url}/{model}", payload, headers=headers)

    def classify_clause(self, text: str) -> Dict[str, Any]:
        """Top label and score for a clause: {"type", "confidence"}."""
        try:
            result = self._infer(settings.clause_classifier_model, {"inputs": text})
            # Text classification may come back nested one level per input
            predictions = result[0] if result and isinstance(result[0], list) else result
            best = max(predictions, key=lambda p: p.get("score", 0.0))
            return {"type": best["label"], "confidence": float(best["score"])}
        except Exception as e:
            logger.error(f"Error classifying clause: {e}")
            raise ExternalServiceError(SERVICE, "Failed to classify clause") from e

    def detect_revenue_triggers(self, text: str) -> List[Dict[str, Any]]:
        """Trigger spans from token classification: {"trigger", "start", "end", "confidence"}."""
        try:
            result = self._infer(settings.revenue_trigger_model, {"inputs": text})
            triggers = []
            for entity in result or []:
                label = entity.get("entity") or entity.get("entity_group") or ""
                if not label.startswith(TRIGGER_ENTITIES):
                    continue
                triggers.append({
                    "trigger": entity.get("word", ""),
                    "start": entity.get("start"),
                    "end": entity.get("end"),
                    "confidence": float(entity.get("score", 0.0)),
                })
            return triggers
        except Exception as e:
            logger.error(f"Error detecting revenue triggers: {e}")
            raise ExternalServiceError(SERVICE, "Failed to detect revenue triggers") from e

    def forecast_revenue(self, history: List[Dict[str, Any]], horizon: int = 12) -> List[Dict[str, Any]]:
        """
        Forecast future revenue from dated history points.

        Args:
            history: [{"date": "YYYY-MM-DD", "value": float}, ...]
            horizon: Number of periods to forecast

        Returns:
            [{"date", "forecast", "lower_bound", "upper_bound"}, ...]
        """
        try:
            series = sorted(
                ({"timestamp": _to_date(point["date"]), "value": float(point["value"])} for point in history),
                key=lambda p: p["timestamp"],
            )
            payload = {
                "inputs": {
                    "timestamps": [p["timestamp"].isoformat() for p in series],
                    "values": [p["value"] for p in series],
                },
                "parameters": {"forecast_horizon": horizon, "return_confidence_intervals": True},
            }
            result = self._infer(settings.forecast_model, payload)
            return [self._forecast_point(item, series, index) for index, item in enumerate(result or [])]
        except Exception as e:
            logger.error(f"Error forecasting revenue: {e}")
            raise ExternalServiceError(SERVICE, "Failed to forecast revenue") from e

    @staticmethod
    def _forecast_point(item: Dict[str, Any], series: List[Dict[str, Any]], index: int) -> Dict[str, Any]:
        stamp = item.get("timestamp") or item.get("date")
        if stamp:
            point_date = _to_date(stamp)
        else:
            # Assume monthly steps after the last observation
            last = series[-1]["timestamp"] if series else date.today()
            point_date = last + timedelta(days=30 * (index + 1))

        value = float(item.get("value", item.get("forecast", 0.0)))
        return {
            "date": point_date.isoformat(),
            "forecast": value,
            "lower_bound": float(item.get("lower_bound", item.get("lowerBound", value))),
            "upper_bound": float(item.get("upper_bound", item.get("upperBound", value))),
        }


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        # Epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).date()
    return datetime.fromisoformat(str(value)[:10]).date()
