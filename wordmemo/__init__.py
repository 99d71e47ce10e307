"""WordMemo: vocabulary lists drilled through adaptive study sessions."""

__version__ = "1.0.0"
