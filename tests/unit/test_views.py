"""
Unit tests for the view renderer and formatting helpers

Tests:
- File sizes, dates and file type detection
- Episode pagination and description cleanup
- Gallery filtering
- Chat transcript, sidebar and escaping
- Navigation chrome, banner and notifications
"""

import pytest

from hereco.auth import AuthUser, NavigationChrome
from hereco.notifications import Notification, NotificationLevel
from hereco.types.admin import AdminUser, ModelConfig
from hereco.types.chat import ChatMessage, ChatSession, MessageRole
from hereco.types.files import FileItem, Pagination
from hereco.types.podcast import Episode
from hereco.views import ViewRenderer
from hereco.views.formatting import (
    file_type_info,
    format_date,
    format_file_size,
    plain_text,
    truncate,
)


@pytest.fixture
def views():
    return ViewRenderer(items_per_page=2)


@pytest.mark.unit
class TestFormatting:
    """Test suite for formatting helpers"""

    @pytest.mark.parametrize("size, expected", [
        (None, "0 Bytes"),
        (0, "0 Bytes"),
        (500, "500 Bytes"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1 MB"),
        (5 * 1024 ** 3, "5 GB"),
    ])
    def test_format_file_size(self, size, expected):
        assert format_file_size(size) == expected

    @pytest.mark.parametrize("value", [
        "Fri, 05 Jan 2024 15:04:00 GMT",
        "2024-01-05T15:04:00Z",
    ])
    def test_format_date(self, value):
        assert format_date(value) == "Jan 5, 2024, 03:04 PM"

    def test_format_date_unparseable(self):
        assert format_date("sometime") == "sometime"
        assert format_date(None) == ""

    @pytest.mark.parametrize("filename, expected", [
        ("cover.PNG", "image"),
        ("talk.mp4", "video"),
        ("episode.mp3", "audio"),
        ("notes.pdf", "document"),
        ("budget.xlsx", "spreadsheet"),
        ("slides.pptx", "presentation"),
        ("backup.tar.gz", "archive"),
        ("README", "default"),
    ])
    def test_file_type_info(self, filename, expected):
        assert file_type_info(filename).type == expected

    def test_plain_text(self):
        assert plain_text("<p>We talk about <b>field</b> recordings.</p>") == "We talk about field recordings."

    def test_truncate(self):
        assert truncate("a" * 10, 5) == "aaaaa..."
        assert truncate("short", 5) == "short"


@pytest.mark.unit
class TestEpisodesView:
    """Test suite for the episode list"""

    def episodes(self, count):
        return [Episode(title=f"Episode {i}", description=f"<p>About {i}</p>") for i in range(1, count + 1)]

    def test_empty(self, views):
        assert "No episodes available." in views.render_episodes([])

    def test_first_page(self, views):
        html = views.render_episodes(self.episodes(3))

        assert html.count('class="episode-card"') == 2
        assert "Page 1 of 2" in html
        assert "<p>About 1</p>" not in html
        assert "About 1" in html

    def test_page_clamped(self, views):
        html = views.render_episodes(self.episodes(3), page=9)

        assert "Episode 3" in html
        assert "Episode 1" not in html
        assert "Page 2 of 2" in html

    def test_episode_details(self, views, mock_episode):
        html = views.render_episodes([Episode.model_validate(mock_episode)])

        assert "Jan 5, 2024, 03:04 PM" in html
        assert "42:10" in html
        assert 'src="https://cdn.hereco.example/12.mp3"' in html
        assert "pagination" not in html


@pytest.mark.unit
class TestGalleryView:
    """Test suite for the file gallery"""

    def test_empty(self, views):
        assert "No files found." in views.render_gallery([])

    def test_files(self, views, mock_file):
        html = views.render_gallery(
            [FileItem.model_validate(mock_file)],
            pagination=Pagination(page=1, total=3, has_more=True),
        )

        assert "file-type-image" in html
        assert "1.5 KB" in html
        assert "3 files" in html
        assert 'href="?page=2"' in html

    def test_filter_by_type(self, views):
        files = [FileItem(name="cover.png"), FileItem(name="notes.pdf")]

        html = views.render_gallery(files, file_type="document")

        assert "notes.pdf" in html
        assert "cover.png" not in html


@pytest.mark.unit
class TestChatView:
    """Test suite for the chat page"""

    def test_welcome_screen(self, views):
        html = views.render_chat([])

        assert "How can I help you today?" in html
        assert "No saved chats" in html

    def test_transcript(self, views):
        messages = [
            ChatMessage(role=MessageRole.USER, content="<script>alert(1)</script>"),
            ChatMessage(role=MessageRole.ASSISTANT, content="Hello"),
        ]

        html = views.render_chat(messages, is_typing=True)

        assert "&lt;script&gt;" in html
        assert "<script>" not in html
        assert "message-user" in html
        assert "message-assistant" in html
        assert f'data-message-id="{messages[0].id}"' in html
        assert "Regenerate" in html
        assert "typing-indicator" in html

    def test_sidebar_marks_current_session(self, views):
        sessions = [ChatSession(id="a", title="First"), ChatSession(id="b", title="Second")]

        html = views.render_chat([], sessions=sessions, current_session_id="b")

        assert 'class="chat-history-item active" data-session-id="b"' in html
        assert 'class="chat-history-item" data-session-id="a"' in html


@pytest.mark.unit
class TestChromeViews:
    """Test suite for navigation, banner, notifications and admin"""

    def test_signed_out_navigation(self, views):
        html = views.render_navigation(NavigationChrome.for_user(None))

        assert "Sign In" in html
        assert "Sign Up" in html

    def test_signed_in_navigation(self, views, user):
        html = views.render_navigation(NavigationChrome.for_user(user))

        assert "Ada Lovelace" in html
        assert "ada@example.com" in html
        assert "Sign In" not in html

    def test_banner(self, views):
        assert views.render_banner(None) == ""

        html = views.render_banner(Notification(message="Backend not configured", level=NotificationLevel.WARNING))

        assert "config-banner-warning" in html

    def test_notifications(self, views):
        html = views.render_notifications([
            Notification(message="Saved", level=NotificationLevel.SUCCESS),
            Notification(message="Failed", level=NotificationLevel.ERROR, detail="Traceback"),
        ])

        assert "notification-success" in html
        assert "notification-detail" in html

    def test_admin(self, views):
        html = views.render_admin(
            config=ModelConfig(primary="gemma2:2b", fallback=["llama3.1:8b"]),
            services={"ollama": {"available": True}, "gemini": False},
            users=[AdminUser(uid="u1", email="a@b.c", is_banned=True, chat_count=2)],
            health={"ollama": {"status": "healthy", "responseTime": 12}},
        )

        assert "gemma2:2b" in html
        assert "llama3.1:8b" in html
        assert "Unban" in html
        assert "12ms" in html
