"""structlog processors applied in production mode."""

from typing import Any, Dict, FrozenSet, Optional

# Matched by substring against lower-cased keys. Phone numbers are
# included because delivery metadata carries them.
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "authorization",
        "credential",
        "cookie",
        "phone",
    }
)


def add_app_info(app_name: str, app_version: str = "unknown"):
    """Processor stamping every entry with the service name and version."""

    def processor(
        logger: Any, method_name: str, event_dict: Dict[str, Any]
    ) -> Dict[str, Any]:
        event_dict["app_name"] = app_name
        event_dict["app_version"] = app_version
        return event_dict

    return processor


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: Optional[FrozenSet[str]] = None,
):
    """Processor replacing sensitive values with ``mask_value``.

    Nested dicts (such as delivery metadata) are masked the same way.
    None values are kept so absent contact details stay visible.

    Args:
        mask_value: Replacement text.
        additional_patterns: Extra key fragments to treat as sensitive.
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def _mask(values: Dict[str, Any]) -> Dict[str, Any]:
        masked = {}
        for key, value in values.items():
            if value is not None and any(p in str(key).lower() for p in patterns):
                masked[key] = mask_value
            elif isinstance(value, dict):
                masked[key] = _mask(value)
            else:
                masked[key] = value
        return masked

    def processor(
        logger: Any, method_name: str, event_dict: Dict[str, Any]
    ) -> Dict[str, Any]:
        return _mask(event_dict)

    return processor


def truncate_large_values(max_length: int = 500):
    """Processor shortening long strings, e.g. operator message content."""

    def processor(
        logger: Any, method_name: str, event_dict: Dict[str, Any]
    ) -> Dict[str, Any]:
        for key, value in event_dict.items():
            if isinstance(value, str) and len(value) > max_length:
                event_dict[key] = (
                    f"{value[:max_length]}...[truncated, {len(value)} chars total]"
                )
        return event_dict

    return processor
