"""Client environment classification from the ``User-Agent`` header.

:func:`classify_os` and :func:`classify_browser` map a raw User-Agent string
to a coarse category with case-insensitive substring checks.  Both are total:
an empty or missing header yields ``"unknown"``.

OS categories
-------------
``"mac"``, ``"windows"``, ``"linux"``, ``"ios"``, ``"android"``, ``"unknown"``

The checks run in a fixed order and the first match wins.  Because real
Android User-Agents contain ``Linux`` they classify as ``"linux"``, and iOS
User-Agents (``like Mac OS X``) classify as ``"mac"``.  Routes that want those
devices treated like their desktop siblings use the aliasing in
:mod:`app.services.personalizer`.

Browser categories
------------------
``"chrome"``, ``"safari"``, ``"firefox"``, ``"edge"``, ``"unknown"``
"""

from typing import Literal, Optional

OSCategory = Literal["mac", "windows", "linux", "ios", "android", "unknown"]
BrowserCategory = Literal["chrome", "safari", "firefox", "edge", "unknown"]

OS_CATEGORIES = ("mac", "windows", "linux", "ios", "android", "unknown")
BROWSER_CATEGORIES = ("chrome", "safari", "firefox", "edge", "unknown")


def classify_os(user_agent: Optional[str]) -> OSCategory:
    """Return the OS category for *user_agent*."""
    ua = (user_agent or "").lower()

    if "mac os x" in ua or "macintosh" in ua:
        return "mac"
    if "windows" in ua:
        return "windows"
    if "linux" in ua:
        return "linux"
    if "iphone" in ua or "ipad" in ua:
        return "ios"
    if "android" in ua:
        return "android"
    return "unknown"


def classify_browser(user_agent: Optional[str]) -> BrowserCategory:
    """Return the browser category for *user_agent*.

    Chromium-based Edge advertises both ``Chrome`` and ``Edg``; it is never
    reported as ``"chrome"``.
    """
    ua = (user_agent or "").lower()

    if "chrome" in ua and "edg" not in ua:
        return "chrome"
    if "safari" in ua and "chrome" not in ua:
        return "safari"
    if "firefox" in ua:
        return "firefox"
    if "edg" in ua:
        return "edge"
    return "unknown"
