"""Share a public profile through a device share sheet, the clipboard or a platform intent URL."""
from __future__ import annotations

import urllib.parse as urlparse
from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from tagcard.domain.visibility import PublicView
from tagcard.services.errors import ShareCancelled, UnknownShareTargetError

ACTION_NATIVE = "native"
ACTION_CLIPBOARD = "clipboard"
ACTION_REDIRECT = "redirect"

TARGET_NATIVE = "native"
TARGET_COPY = "copy"
TARGET_INSTAGRAM = "instagram"

# {text} and {url} are already URL-encoded when substituted
DEEP_LINKS = {
    "whatsapp": "https://wa.me/?text={text}%20{url}",
    "twitter": "https://twitter.com/intent/tweet?text={text}&url={url}",
    "facebook": "https://www.facebook.com/sharer/sharer.php?u={url}",
    "snapchat": "https://www.snapchat.com/scan?attachmentUrl={url}",
    "linkedin": "https://www.linkedin.com/sharing/share-offsite/?url={url}",
    "telegram": "https://t.me/share/url?url={url}&text={text}",
    "email": "mailto:?subject={title}&body={text}%20{url}",
}

# platforms without a public web intent: copy the link and tell the user where to paste it
MANUAL_PASTE = {
    TARGET_INSTAGRAM: "Link copied! Share it on Instagram.",
}

SHARE_TARGETS = (TARGET_NATIVE, TARGET_COPY, *DEEP_LINKS, *MANUAL_PASTE)

COPY_CONFIRMATION = "Link copied to clipboard!"

NativeShare = Callable[[str, str, str], None]
Clipboard = Callable[[str], None]


@dataclass(frozen=True)
class ShareAction:
    target: str
    action: str
    url: str
    title: str = ""
    text: str = ""
    href: Optional[str] = None
    message: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "target": self.target,
            "action": self.action,
            "url": self.url,
            "title": self.title,
            "text": self.text,
            "href": self.href,
            "message": self.message,
        }


def share_title(view: PublicView) -> str:
    return f"{view.display_name} on TagCard"


def share_message(view: PublicView) -> str:
    return f"Check out {view.display_name}'s TagCard profile!"


class ShareService:
    """Formats the per-channel share payload and, when given the device hooks, performs it."""

    def plan(self, target: str, view: PublicView, url: str) -> ShareAction:
        name = (target or "").strip().lower()
        title = share_title(view)
        text = share_message(view)
        if name == TARGET_NATIVE:
            return ShareAction(name, ACTION_NATIVE, url, title=title, text=text)
        if name == TARGET_COPY:
            return ShareAction(name, ACTION_CLIPBOARD, url, title=title, text=text, message=COPY_CONFIRMATION)
        if name in MANUAL_PASTE:
            return ShareAction(name, ACTION_CLIPBOARD, url, title=title, text=text, message=MANUAL_PASTE[name])
        template = DEEP_LINKS.get(name)
        if not template:
            raise UnknownShareTargetError(target)
        href = template.format(
            text=urlparse.quote(text, safe=""),
            url=urlparse.quote(url, safe=""),
            title=urlparse.quote(title, safe=""),
        )
        return ShareAction(name, ACTION_REDIRECT, url, title=title, text=text, href=href)

    def share(
        self,
        target: str,
        view: PublicView,
        url: str,
        *,
        native: NativeShare | None = None,
        clipboard: Clipboard | None = None,
    ) -> ShareAction:
        """
        Run the planned action in-process, for callers that own the device
        hooks (an embedding client or a desktop shell). The HTTP routes only
        return ``plan`` and the page script performs the same steps.

        A native sheet dismissed by the user resolves silently; without a
        native share the plain URL goes to the clipboard.
        """
        plan = self.plan(target, view, url)
        if plan.action == ACTION_NATIVE:
            if native is not None:
                try:
                    native(plan.title, plan.text, plan.url)
                except ShareCancelled:
                    logger.debug("Native share dismissed for {}", view.public_id)
                return plan
            plan = ShareAction(
                plan.target,
                ACTION_CLIPBOARD,
                url,
                title=plan.title,
                text=plan.text,
                message=COPY_CONFIRMATION,
            )
        if plan.action == ACTION_CLIPBOARD and clipboard is not None:
            clipboard(plan.url)
        return plan
