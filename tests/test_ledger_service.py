import pytest

from studyapi.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from studyapi.models.ledger import CoinTransaction, TransactionKind
from studyapi.models.user import User as UserModel
from studyapi.repositories.ledger_repository import LedgerRepository
from studyapi.services.ledger_service import LedgerUpdater


@pytest.fixture
def ledger(db, role):
    return LedgerUpdater(db, role)


def _reload(db, user_id: str) -> UserModel:
    db.expire_all()
    return db.get(UserModel, user_id)


class TestLedgerUpdater:
    """코인 원장 업데이트 테스트"""

    def test_requires_service_role(self, db):
        with pytest.raises(AuthorizationError):
            LedgerUpdater(db, role="internal")

    def test_credit_updates_totals_and_appends_entry(self, db, ledger, make_user):
        # Given
        make_user("alice")

        # When
        entry = ledger.apply("alice", 25, TransactionKind.BONUS, "bonus:1", "welcome")
        db.commit()

        # Then
        user = _reload(db, "alice")
        assert (user.total_coins, user.coins_earned, user.coins_spent) == (25, 25, 0)
        assert entry.balance_after == 25
        assert entry.kind == TransactionKind.BONUS

    def test_debit_below_zero_is_rejected_without_changes(self, db, ledger, make_user):
        # Given
        make_user("alice", coins=3)

        # When / Then
        with pytest.raises(InsufficientBalanceError):
            ledger.apply("alice", -5, TransactionKind.SPENT, "download:1", "too expensive")
        db.rollback()

        user = _reload(db, "alice")
        assert (user.total_coins, user.coins_earned, user.coins_spent) == (3, 3, 0)
        assert db.query(CoinTransaction).filter_by(ref_key="download:1").count() == 0

    def test_duplicate_ref_key_is_rejected(self, db, ledger, make_user):
        make_user("alice")
        ledger.apply("alice", 10, TransactionKind.EARNED, "upload:1", "reward")
        db.commit()

        with pytest.raises(ConflictError):
            ledger.apply("alice", 10, TransactionKind.EARNED, "upload:1", "reward again")
        db.rollback()

        assert _reload(db, "alice").total_coins == 10

    @pytest.mark.parametrize(
        "kind, amount",
        [
            (TransactionKind.EARNED, -1),
            (TransactionKind.BONUS, 0),
            (TransactionKind.PENALTY, 5),
            (TransactionKind.SPENT, 3),
        ],
    )
    def test_amount_sign_must_match_kind(self, ledger, make_user, kind, amount):
        make_user("alice", coins=10)

        with pytest.raises(ValidationError):
            ledger.apply("alice", amount, kind, "ref:1", "bad sign")

    def test_unknown_user(self, ledger):
        with pytest.raises(NotFoundError):
            ledger.apply("ghost", 10, TransactionKind.BONUS, "bonus:ghost", "nobody")

    def test_totals_stay_consistent_over_many_entries(self, db, ledger, make_user):
        make_user("alice")
        ledger.apply("alice", 40, TransactionKind.EARNED, "upload:1", "reward")
        ledger.apply("alice", -15, TransactionKind.SPENT, "download:1", "download")
        ledger.apply("alice", -5, TransactionKind.PENALTY, "penalty:1", "spam")
        db.commit()

        user = _reload(db, "alice")
        assert user.total_coins == 20
        assert user.total_coins == user.coins_earned - user.coins_spent
        assert user.coins_spent == 20


class TestLedgerRepository:
    """원장 리포지토리 테스트"""

    def test_entries_cannot_be_updated(self, db, ledger, make_user):
        make_user("alice")
        entry = ledger.apply("alice", 10, TransactionKind.BONUS, "bonus:1", "welcome")
        db.commit()

        with pytest.raises(ValidationError):
            LedgerRepository(db).update(entry.id, amount=1000)

        db.expire_all()
        assert db.get(CoinTransaction, entry.id).amount == 10
