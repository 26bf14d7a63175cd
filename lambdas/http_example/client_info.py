"""Client IP and User-Agent heuristics.

Every value here comes from client-controlled headers and can be forged.
"""

from typing import Any, Dict, Optional

from .request import HttpRequest

UNKNOWN = "Unknown"
UNKNOWN_BROWSER = "Unknown Browser"
UNKNOWN_OS = "Unknown OS"

IP_HEADERS = ("X-Real-IP", "X-Client-IP", "Remote-Addr")


def get_client_ip(request: HttpRequest) -> str:
    forwarded_for = request.header("X-Forwarded-For")
    if forwarded_for:
        # first entry is the originating client, the rest are proxies
        return forwarded_for.split(",")[0].strip()

    for name in IP_HEADERS:
        value = request.header(name)
        if value:
            return value
    return UNKNOWN


def parse_browser(user_agent: str) -> str:
    """Map a User-Agent to a browser family.

    Checks run in order because tokens overlap: Edge carries ``chrome/``,
    Chrome carries ``safari/``.
    """
    ua = user_agent.lower()
    if "edg/" in ua:
        return "Microsoft Edge"
    if "chrome/" in ua and "edg/" not in ua:
        return "Google Chrome"
    if "firefox/" in ua:
        return "Mozilla Firefox"
    if "safari/" in ua and "chrome/" not in ua:
        return "Apple Safari"
    if "opera/" in ua or "opr/" in ua:
        return "Opera"
    if "msie" in ua or "trident/" in ua:
        return "Internet Explorer"
    return UNKNOWN_BROWSER


def parse_os(user_agent: str) -> str:
    ua = user_agent.lower()
    if "windows nt" in ua:
        return "Windows"
    if "mac os x" in ua or "macintosh" in ua:
        return "macOS"
    if "linux" in ua:
        return "Linux"
    if "android" in ua:
        return "Android"
    if "iphone" in ua or "ipad" in ua:
        return "iOS"
    return UNKNOWN_OS


def get_client_info(request: HttpRequest) -> Dict[str, Optional[Any]]:
    user_agent = request.header("User-Agent")
    return {
        "userAgent": user_agent if user_agent is not None else UNKNOWN,
        "browser": parse_browser(user_agent) if user_agent is not None else UNKNOWN_BROWSER,
        "operatingSystem": parse_os(user_agent) if user_agent is not None else UNKNOWN_OS,
        "acceptLanguage": request.header("Accept-Language"),
        "acceptEncoding": request.header("Accept-Encoding"),
        "accept": request.header("Accept"),
    }
