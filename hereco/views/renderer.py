"""
View Renderer - HTML fragments for the site pages

Renders jinja2 templates from ``views/templates``. Views only read state;
every change goes through the chat store, the auth bridge or the client.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..auth import NavigationChrome
from ..notifications import Notification
from ..types.admin import AdminUser, ModelConfig
from ..types.chat import ChatMessage, ChatSession, MessageRole
from ..types.files import FileItem, Pagination
from ..types.podcast import Episode
from .formatting import (
    DESCRIPTION_LENGTH,
    file_type_info,
    format_date,
    format_file_size,
    plain_text,
    truncate,
)

logger = logging.getLogger(__name__)


class ViewRenderer:
    """
    Builds page fragments from Jinja2 templates.

    Fragments:
    - episodes: podcast episode cards, paginated
    - gallery: file grid with pagination controls
    - chat: session sidebar plus the current transcript
    - admin: model configuration, services, users and health
    - navigation / banner / notifications: page chrome
    """

    def __init__(self, items_per_page: int = 12, templates_dir: Optional[Path] = None):
        templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(templates_dir),
            autoescape=select_autoescape(['html', 'xml']),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["file_size"] = format_file_size
        self.env.filters["date"] = format_date
        self.env.filters["plain_text"] = plain_text
        self.env.filters["truncate_text"] = truncate
        self.env.globals["file_type_info"] = file_type_info
        self.items_per_page = max(1, items_per_page)

    def render(self, template_name: str, **context: Any) -> str:
        template = self.env.get_template(template_name)
        return template.render(**context)

    def render_episodes(self, episodes: Sequence[Episode], page: int = 1) -> str:
        """
        Episode cards for one page of the list

        Args:
            episodes: All episodes, newest first
            page: 1-based page number; out of range pages are clamped
        """
        total_pages = max(1, -(-len(episodes) // self.items_per_page))
        page = min(max(1, page), total_pages)
        start = (page - 1) * self.items_per_page
        return self.render(
            "episodes.html",
            episodes=episodes[start:start + self.items_per_page],
            page=page,
            total_pages=total_pages,
            description_length=DESCRIPTION_LENGTH,
        )

    def render_gallery(
        self,
        files: Sequence[FileItem],
        pagination: Optional[Pagination] = None,
        file_type: Optional[str] = None,
    ) -> str:
        """File grid; ``file_type`` keeps only one category (image, video, ...)"""
        if file_type and file_type != "all":
            files = [f for f in files if file_type_info(f.name).type == file_type]
        return self.render("gallery.html", files=files, pagination=pagination)

    def render_chat(
        self,
        messages: Sequence[ChatMessage],
        sessions: Sequence[ChatSession] = (),
        current_session_id: Optional[str] = None,
        is_typing: bool = False,
    ) -> str:
        """Chat page: sidebar of saved sessions and the transcript, or the welcome screen"""
        return self.render(
            "chat.html",
            messages=messages,
            sessions=sessions,
            current_session_id=current_session_id,
            is_typing=is_typing,
            roles=MessageRole,
        )

    def render_admin(
        self,
        config: Optional[ModelConfig] = None,
        services: Optional[Dict[str, Any]] = None,
        users: Sequence[AdminUser] = (),
        health: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> str:
        return self.render(
            "admin.html",
            config=config,
            services=services or {},
            users=users,
            health=health or {},
        )

    def render_navigation(self, chrome: NavigationChrome) -> str:
        return self.render("navigation.html", chrome=chrome)

    def render_banner(self, banner: Optional[Notification]) -> str:
        if banner is None:
            return ""
        return self.render("banner.html", banner=banner)

    def render_notifications(self, notifications: List[Notification]) -> str:
        return self.render("notifications.html", notifications=notifications)
