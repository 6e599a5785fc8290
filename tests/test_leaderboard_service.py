import pytest

from studyapi.models.user import User as UserModel
from studyapi.schemas.leaderboard import LeaderboardMetric
from studyapi.services.download_service import DownloadService
from studyapi.services.leaderboard_service import LeaderboardService


@pytest.fixture
def leaderboard_service(db, settings):
    return LeaderboardService(db, settings)


class TestLeaderboard:
    """리더보드 테스트"""

    def test_ranks_by_coins(self, leaderboard_service, make_user):
        # Given
        make_user("u1", coins=5)
        make_user("u2", coins=50)
        make_user("u3", coins=20)

        # When
        board = leaderboard_service.get_leaderboard(LeaderboardMetric.COINS, limit=10)

        # Then
        assert [e.user_id for e in board.entries] == ["u2", "u3", "u1"]
        assert [e.rank for e in board.entries] == [1, 2, 3]
        assert board.entries[0].value == 50

    def test_ranks_by_uploads(self, leaderboard_service, make_user, make_resource):
        make_user("u1")
        make_user("u2")
        make_resource("u2")
        make_resource("u2")
        make_resource("u1")

        board = leaderboard_service.get_leaderboard(LeaderboardMetric.UPLOADS)

        assert [(e.user_id, e.value) for e in board.entries] == [("u2", 2), ("u1", 1)]
        assert board.entries[0].achievements_count == 1

    def test_ranks_by_downloads(self, db, role, leaderboard_service, make_user, make_resource):
        make_user("owner")
        resource = make_resource("owner", coin_price=1)
        make_user("reader", coins=3)
        DownloadService(db, role).download_resource("reader", resource.id)

        board = leaderboard_service.get_leaderboard(LeaderboardMetric.DOWNLOADS, limit=1)

        assert len(board.entries) == 1
        assert board.entries[0].user_id == "reader"

    def test_inactive_users_excluded(self, db, leaderboard_service, make_user):
        make_user("u1", coins=100)
        make_user("u2", coins=1)
        db.get(UserModel, "u1").is_active = False
        db.commit()

        board = leaderboard_service.get_leaderboard()

        assert [e.user_id for e in board.entries] == ["u2"]

    def test_user_rank_shares_ties(self, leaderboard_service, make_user):
        make_user("u1", coins=30)
        make_user("u2", coins=30)
        make_user("u3", coins=10)

        assert leaderboard_service.get_user_rank("u2").rank == 1
        assert leaderboard_service.get_user_rank("u3").rank == 3
        assert leaderboard_service.get_user_rank("ghost") is None
