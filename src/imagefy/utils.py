SIZE_UNITS = ("bytes", "KB", "MB", "GB", "TB", "PB")


def format_size(num_bytes: int) -> str:
    """
    Format a byte count for humans.

    Parameters
    ----------
    num_bytes : int
        Number of bytes.

    Returns
    -------
    str
        For example ``"512 bytes"`` or ``"1.50 MB"``.
    """
    if num_bytes < 1024:
        return f"{num_bytes} bytes"
    value = float(num_bytes)
    for unit in SIZE_UNITS[1:]:
        value /= 1024
        if value < 1024 or unit == SIZE_UNITS[-1]:
            break
    return f"{value:.2f} {unit}"
