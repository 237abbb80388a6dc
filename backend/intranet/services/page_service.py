"""Content page services: slugs, titles, markdown rendering and CRUD."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from markdown_it import MarkdownIt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.models.page import Page
from intranet.services.errors import PageExistsError

logger = logging.getLogger(__name__)

PLACEHOLDER_BODY = "Innehåll kommer snart..."

_SWEDISH_LETTERS = str.maketrans({"å": "a", "ä": "a", "ö": "o"})
_DISALLOWED_SLUG_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_TITLE_HEADING = re.compile(r"^#[ \t]+(?P<title>.+?)[ \t#]*$", re.MULTILINE)

# Raw HTML in page sources is rendered as text, never passed through.
_markdown = MarkdownIt("commonmark", {"html": False, "linkify": False}).enable(
    ["table", "strikethrough"]
)


def slugify_title(title: str) -> str:
    """Derive a page id from a title, e.g. ``"Tvättstuga & bastu"`` -> ``tvattstuga-bastu``."""
    slug = title.strip().lower().translate(_SWEDISH_LETTERS)
    slug = _DISALLOWED_SLUG_CHARS.sub("", slug)
    return _WHITESPACE.sub("-", slug)


def display_name_for_id(page_id: str) -> str:
    words = page_id.replace("-", " ").split()
    return " ".join(words).capitalize() if words else page_id


def extract_title(content: str, page_id: str | None = None) -> str | None:
    """Return the first level-1 heading of a markdown source."""
    match = _TITLE_HEADING.search(content or "")
    if match:
        return match.group("title").strip()
    if page_id:
        return display_name_for_id(page_id)
    return None


def replace_title(content: str, title: str) -> str:
    """Swap the first level-1 heading for ``title`` or prepend one."""
    heading = f"# {title}"
    if _TITLE_HEADING.search(content or ""):
        return _TITLE_HEADING.sub(lambda _: heading, content, count=1)
    if not content:
        return heading + "\n"
    return f"{heading}\n\n{content}"


def render_markdown(content: str) -> str:
    """Render page markdown to HTML."""
    return _markdown.render(content or "")


def initial_content(title: str) -> str:
    return f"# {title}\n\n{PLACEHOLDER_BODY}\n"


async def list_pages(session: AsyncSession) -> Sequence[Page]:
    result = await session.execute(select(Page).order_by(Page.title))
    return result.scalars().all()


async def get_page(session: AsyncSession, *, page_id: str) -> Page | None:
    return await session.get(Page, page_id)


async def create_page(
    session: AsyncSession,
    *,
    title: str,
    page_id: str | None = None,
    content: str | None = None,
) -> Page:
    """Create a page; the id is derived from the title when not given."""
    title = title.strip()
    if not title:
        raise ValueError("Page title cannot be empty")
    page_id = (page_id or slugify_title(title)).strip()
    if not page_id:
        raise ValueError("Page id cannot be empty")
    if await get_page(session, page_id=page_id) is not None:
        raise PageExistsError(f"A page with id '{page_id}' already exists")

    page = Page(
        id=page_id,
        title=title,
        content=content if content is not None else initial_content(title),
    )
    session.add(page)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise PageExistsError(f"A page with id '{page_id}' already exists") from exc
    await session.refresh(page)
    logger.info("Created page %s", page_id)
    return page


async def update_page_content(session: AsyncSession, *, page: Page, content: str) -> Page:
    """Replace a page's markdown; its title follows the first heading."""
    page.content = content
    page.title = extract_title(content) or page.title
    await session.commit()
    await session.refresh(page)
    return page


async def rename_page(session: AsyncSession, *, page: Page, title: str) -> Page:
    title = title.strip()
    if not title:
        raise ValueError("Page title cannot be empty")
    page.title = title
    page.content = replace_title(page.content, title)
    await session.commit()
    await session.refresh(page)
    return page


async def change_page_id(session: AsyncSession, *, page: Page, new_id: str) -> Page:
    """Move a page to a new id: copy it under the new id, then drop the old row."""
    new_id = new_id.strip()
    if not new_id:
        raise ValueError("Page id cannot be empty")
    if new_id == page.id:
        return page
    if await get_page(session, page_id=new_id) is not None:
        raise PageExistsError(f"A page with id '{new_id}' already exists")

    old_id = page.id
    moved = Page(id=new_id, title=page.title, content=page.content)
    session.add(moved)
    await session.delete(page)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise PageExistsError(f"A page with id '{new_id}' already exists") from exc
    await session.refresh(moved)
    logger.info("Page renamed from %s to %s", old_id, new_id)
    return moved


async def delete_page(session: AsyncSession, *, page_id: str) -> bool:
    """Delete a page; a page that is already gone is not an error."""
    page = await get_page(session, page_id=page_id)
    if page is None:
        logger.info("Page %s not found, nothing to delete", page_id)
        return False
    await session.delete(page)
    await session.commit()
    return True
