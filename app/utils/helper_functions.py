from typing import Mapping, Optional


def get_client_ip(headers: Mapping[str, str], peer: Optional[str] = None) -> str:
    """Resolve the client IP behind the edge proxy.

    Args:
        headers: Request headers
        peer: Address of the direct peer, if known

    Returns:
        First address of X-Forwarded-For, else CF-Connecting-IP, else the
        peer address, else "unknown"
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    return headers.get("cf-connecting-ip") or peer or "unknown"
