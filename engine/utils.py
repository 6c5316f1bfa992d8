import hashlib
import re
from decimal import Decimal, ROUND_HALF_UP


def round2(value: float) -> float:
    """Round half-up to two decimal places."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def to_title_case(text: str) -> str:
    """Title-case a candidate name, splitting on whitespace and hyphens."""
    if not text:
        return ""
    words = [w for w in re.split(r"[\s-]+", text.lower()) if w]
    return " ".join(w[0].upper() + w[1:] for w in words)


class ContentFingerprinter:
    """
    Deterministic fingerprints for content-addressed caching.
    """

    @staticmethod
    def calculate(text: str) -> str:
        """
        SHA256 of the text with whitespace runs collapsed and ends stripped.
        """
        normalized = re.sub(r"\s+", " ", text or "").strip()
        return hashlib.sha256(normalized.encode("utf-8")).hexdigest()
