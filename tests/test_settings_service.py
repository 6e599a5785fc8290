from studyapi.schemas.settings import Theme, UserSettingsUpdate
from studyapi.services.settings_service import SettingsService


class TestSettingsService:
    """사용자 설정 테스트"""

    def test_defaults(self, db, make_user):
        make_user("alice")

        user_settings = SettingsService(db).get_settings("alice")

        assert user_settings.email_notifications is True
        assert user_settings.theme == Theme.SYSTEM
        assert user_settings.profile_public is True

    def test_partial_update(self, db, make_user):
        make_user("alice")
        service = SettingsService(db)

        updated = service.update_settings(
            "alice", UserSettingsUpdate(theme=Theme.DARK, push_notifications=False)
        )

        assert updated.theme == Theme.DARK
        assert updated.push_notifications is False
        assert updated.email_notifications is True

    def test_missing_user(self, db):
        service = SettingsService(db)

        assert service.get_settings("ghost") is None
        assert service.update_settings("ghost", UserSettingsUpdate(language="ko")) is None
