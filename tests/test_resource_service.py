import pytest

from studyapi.config import Settings
from studyapi.core.exceptions import NotFoundError, ValidationError
from studyapi.models.ledger import CoinTransaction, TransactionKind
from studyapi.schemas.resource import ResourceCreate, ResourceFilters, ResourceSort
from studyapi.services.resource_service import ResourceService
from studyapi.services.user_service import UserService


@pytest.fixture
def resource_service(db, settings, role):
    return ResourceService(db, settings, role)


def _payload(**overrides) -> ResourceCreate:
    fields = {
        "title": "Organic Chemistry Summary",
        "file_path": "resources/alice/chem.pdf",
        "file_type": "pdf",
        "file_size": 2048,
        "coin_price": 5,
    }
    fields.update(overrides)
    return ResourceCreate(**fields)


class TestUploadResource:
    """자료 업로드 + 업로드 보상 테스트"""

    def test_upload_rewards_uploader(self, db, resource_service, make_user, settings, role):
        # Given
        make_user("alice")

        # When
        result = resource_service.upload_resource("alice", _payload())

        # Then
        assert result.coins_awarded == 10
        assert result.balance_after == 10
        assert result.new_achievements == ["first_upload"]

        user = UserService(db, settings, role).get_profile("alice")
        assert user.coins_earned == 10
        assert user.total_coins == 10
        assert user.uploaded_files_count == 1

        entries = db.query(CoinTransaction).filter_by(user_id="alice").all()
        assert len(entries) == 1
        assert entries[0].kind == TransactionKind.EARNED
        assert entries[0].resource_id == result.resource.id
        assert entries[0].ref_key == f"upload:{result.resource.id}"

    def test_zero_reward_uploads_without_ledger_entry(self, db, make_user, settings, role):
        """보상이 0 으로 설정되면 업로드는 성공하고 원장 항목은 남지 않는다"""
        # Given
        make_user("alice")
        no_reward = settings.model_copy(update={"UPLOAD_REWARD_COINS": 0})
        service = ResourceService(db, no_reward, role)

        # When
        result = service.upload_resource("alice", _payload())

        # Then
        assert result.coins_awarded == 0
        assert result.balance_after == 0
        assert result.new_achievements == ["first_upload"]
        user = UserService(db, settings, role).get_profile("alice")
        assert (user.total_coins, user.uploaded_files_count) == (0, 1)
        assert db.query(CoinTransaction).filter_by(user_id="alice").count() == 0

    def test_negative_reward_setting_rejected(self):
        with pytest.raises(ValueError):
            Settings(UPLOAD_REWARD_COINS=-1)

    def test_reward_does_not_depend_on_price(self, resource_service, make_user):
        make_user("alice")

        result = resource_service.upload_resource("alice", _payload(coin_price=0))

        assert result.coins_awarded == 10

    def test_file_type_is_normalized(self, resource_service, make_user):
        make_user("alice")

        result = resource_service.upload_resource("alice", _payload(file_type=".PDF"))

        assert result.resource.file_type == "pdf"

    def test_disallowed_file_type(self, resource_service, make_user):
        make_user("alice")

        with pytest.raises(ValidationError):
            resource_service.upload_resource("alice", _payload(file_type="exe"))

    def test_file_too_large(self, resource_service, make_user, settings):
        make_user("alice")

        with pytest.raises(ValidationError):
            resource_service.upload_resource(
                "alice", _payload(file_size=settings.MAX_FILE_SIZE_BYTES + 1)
            )

    def test_price_above_maximum(self, resource_service, make_user, settings):
        make_user("alice")

        with pytest.raises(ValidationError):
            resource_service.upload_resource(
                "alice", _payload(coin_price=settings.MAX_COIN_PRICE + 1)
            )

    def test_negative_price_rejected_by_schema(self):
        with pytest.raises(ValueError):
            _payload(coin_price=-1)

    def test_unknown_uploader(self, resource_service):
        with pytest.raises(NotFoundError):
            resource_service.upload_resource("ghost", _payload())


class TestListResources:
    """자료 목록/검색 테스트"""

    def test_filters_and_sorting(self, resource_service, make_user, make_resource):
        # Given
        make_user("alice")
        make_resource("alice", coin_price=8, title="Calculus I", subject="math")
        make_resource("alice", coin_price=2, title="Calculus II", subject="math")
        make_resource("alice", coin_price=4, title="Cell Biology", subject="biology")

        # When
        page = resource_service.list_resources(
            ResourceFilters(subject="math", sort=ResourceSort.PRICE_ASC)
        )

        # Then
        assert page.total_count == 2
        assert [r.title for r in page.data] == ["Calculus II", "Calculus I"]
        assert page.has_next is False

    def test_search_and_paging(self, resource_service, make_user, make_resource):
        make_user("alice")
        for i in range(3):
            make_resource("alice", title=f"Physics Lecture {i}")
        make_resource("alice", title="History Essay")

        page = resource_service.list_resources(ResourceFilters(search="physics", limit=2))

        assert page.total_count == 3
        assert len(page.data) == 2
        assert page.has_next is True

    def test_max_price_filter(self, resource_service, make_user, make_resource):
        make_user("alice")
        make_resource("alice", coin_price=0, title="Free")
        make_resource("alice", coin_price=50, title="Premium")

        page = resource_service.list_resources(ResourceFilters(max_price=10))

        assert [r.title for r in page.data] == ["Free"]

    def test_get_missing_resource_returns_none(self, resource_service):
        assert resource_service.get_resource(999) is None
