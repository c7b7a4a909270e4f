from sqlalchemy import func, select

from backend.cms.models import Message, Post, PostKind, Setting
from backend.cms.services.content_service import ContentService, PostInput
from backend.cms.services.message_service import ContactSubmission, MessageService, sanitize_email
from backend.cms.services.seed import seed_initial_content
from backend.cms.services.settings_service import THEME_KEY, SettingsService, default_settings


def _count(db, model):
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def test_first_run_seed(db):
    assert _count(db, Setting) == len(default_settings())
    assert _count(db, Post) == 3
    assert _count(db, Message) == 1
    welcome = ContentService(db).get_post_by_slug("welcome")
    assert welcome.type == "page"
    assert "MiniCMS" in welcome.content


def test_seed_is_gated_on_settings_rows(db, cms_settings):
    db.query(Post).delete()
    db.query(Message).delete()
    db.commit()
    assert seed_initial_content(db, cms_settings) is False
    assert _count(db, Post) == 0


def test_post_input_from_form():
    data = PostInput.from_form({"title": "  My Title ", "content": "<b>x</b> ", "type": "page", "slug": ""})
    assert data.title == "My Title"
    assert data.content == "<b>x</b> "
    assert data.type == "page"
    assert data.slug == "my-title"

    custom = PostInput.from_form({"title": "T", "content": "", "type": "bogus", "slug": "Custom Slug!"})
    assert custom.slug == "custom-slug"
    assert custom.type == "post"


def test_content_crud(db):
    service = ContentService(db)
    created = service.create_post(PostInput.from_form({"title": "Fresh", "content": "<p>Body</p>", "type": "post"}))
    assert created is not None and created.id

    fetched = service.get_post_by_slug(created.slug)
    assert (fetched.title, fetched.content, fetched.type) == ("Fresh", "<p>Body</p>", "post")

    first_created_at = fetched.created_at
    updated = service.update_post(
        created.id, PostInput.from_form({"title": "Renamed", "content": "new", "type": "page", "slug": "renamed"})
    )
    assert updated.slug == "renamed"
    assert updated.type == "page"
    assert updated.created_at == first_created_at
    assert updated.updated_at >= first_created_at

    assert service.delete_post(created.id) is True
    assert service.get_post(created.id) is None
    assert service.delete_post(created.id) is False


def test_missing_lookups_return_none(db):
    service = ContentService(db)
    assert service.get_post(99999) is None
    assert service.get_post(None) is None
    assert service.get_post_by_slug("does-not-exist") is None
    assert service.get_post_by_slug("") is None
    assert service.update_post(99999, PostInput.from_form({"title": "x"})) is None


def test_list_posts_newest_first_and_filtered(db):
    service = ContentService(db)
    newest = service.create_post(PostInput.from_form({"title": "Newest", "content": "", "type": "post"}))
    posts = service.list_posts(PostKind.POST)
    assert posts[0].id == newest.id
    assert all(p.type == "post" for p in posts)
    assert [p.slug for p in service.list_posts("page")] == ["welcome"]
    assert len(service.list_posts()) == 4


def test_contact_rejects_blank_fields(db):
    service = MessageService(db)
    before = _count(db, Message)
    for missing in ("name", "email", "subject", "message"):
        form = {"name": "Ann", "email": "ann@example.com", "subject": "Hi", "message": "Hello"}
        form[missing] = "   "
        assert service.create_message(ContactSubmission.from_form(form)) is None
    assert _count(db, Message) == before


def test_contact_accepts_complete_submission(db):
    service = MessageService(db)
    before = _count(db, Message)
    unread_before = service.unread_count()
    stored = service.create_message(
        ContactSubmission.from_form({"name": " Ann ", "email": "ann@example.com", "subject": "Hi", "message": "Hello"})
    )
    assert stored.name == "Ann"
    assert stored.is_read is False
    assert _count(db, Message) == before + 1
    assert service.unread_count() == unread_before + 1


def test_sanitize_email():
    assert sanitize_email(" ann (at) example.com ") == "annatexample.com"
    assert sanitize_email("<script>@x.y") == "script@x.y"


def test_mark_read_is_one_way(db):
    service = MessageService(db)
    message = service.list_messages()[0]
    assert message.is_read is False
    unread = service.unread_count()

    service.mark_read(message)
    assert service.get_message(message.id).is_read is True
    assert service.unread_count() == unread - 1

    service.mark_read(message)
    assert service.get_message(message.id).is_read is True
    assert service.unread_count() == unread - 1


def test_list_messages_limit(db):
    service = MessageService(db)
    for i in range(3):
        service.create_message(ContactSubmission("N", "n@example.com", f"S{i}", "M"))
    assert len(service.list_messages()) == 4
    limited = service.list_messages(limit=2)
    assert [m.subject for m in limited] == ["S2", "S1"]


def test_settings_round_trip_per_key(db, cms_settings):
    service = SettingsService(db, cms_settings)
    for key, default in service.defaults.items():
        value = default.options[-1] if default.options else f"value-for-{key}"
        before = service.site_settings()
        assert service.save_settings({key: f" {value} "}) == [key]
        after = service.site_settings()
        assert after[key] == value
        for other in service.defaults:
            if other != key:
                assert after[other] == before[other]


def test_settings_ignore_unknown_keys(db, cms_settings):
    service = SettingsService(db, cms_settings)
    assert service.save_settings({"evil": "x", "site_title": "T"}) == ["site_title"]
    assert "evil" not in service.site_settings()
    assert db.get(Setting, "evil") is None


def test_missing_row_falls_back_to_default(db, cms_settings):
    db.query(Setting).filter(Setting.name == THEME_KEY).delete()
    db.commit()
    service = SettingsService(db, cms_settings)
    assert service.site_settings()[THEME_KEY] == "azure"
    assert service.get_setting(THEME_KEY) == "azure"
    assert service.get_setting("unknown") is None


def test_select_setting_rejects_unknown_option(db, cms_settings):
    service = SettingsService(db, cms_settings)
    assert service.save_settings({THEME_KEY: "a\tb", "site_title": "Kept"}) == ["site_title"]
    assert service.get_setting(THEME_KEY) == "azure"
    assert service.save_settings({THEME_KEY: " jade "}) == [THEME_KEY]
    assert service.get_setting(THEME_KEY) == "jade"


def test_out_of_range_ids_are_not_found(db):
    huge = 10**20
    assert ContentService(db).get_post(huge) is None
    assert ContentService(db).delete_post(-huge) is False
    assert MessageService(db).get_message(huge) is None
    assert MessageService(db).delete_message(huge) is False
