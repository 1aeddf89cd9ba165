"""Keyword tables for capability extraction."""

SYMBOLIC_KEYWORDS: tuple[str, ...] = (
    "vehicle id",
    "vehicle ids",
    "code",
    "alphanumeric",
    "plate",
    "number",
    "numbers",
    "dispatch",
    "id",
    "ids",
    "reference",
    "reference number",
    "tracking number",
)

NOISY_KEYWORDS: tuple[str, ...] = (
    "noise",
    "noisy",
    "call",
    "environment",
    "field",
    "outdoor",
)

EXECUTION_KEYWORDS: tuple[str, ...] = (
    "dispatch",
    "route",
    "execute",
    "execution",
    "action",
    "trigger",
)

CONFIRMATION_KEYWORDS: tuple[str, ...] = ("confirm", "readback", "verify", "acknowledge")

PRONUNCIATION_KEYWORDS: tuple[str, ...] = ("pronounce", "spell", "phonetic")

MEMORY_KEYWORDS: tuple[str, ...] = ("memory", "context", "remember", "history")
