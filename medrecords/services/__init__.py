class RecordNotPersistedError(RuntimeError):
    """An insert succeeded but the row could not be read back."""
