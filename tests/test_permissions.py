import pytest

from taskdesk.utils.permissions import Decision, authorize


@pytest.mark.parametrize(
    "role, actor, owner, owner_supervisor, allowed",
    [
        ("User", "a", "a", None, True),
        ("User", "a", "b", None, False),
        # Being named as the owner's supervisor means nothing for a plain User
        ("User", "a", "b", "a", False),
        ("Supervisor", "s", "s", None, True),
        ("Supervisor", "s", "b", "s", True),
        ("Supervisor", "s", "b", "other", False),
        ("Supervisor", "s", "b", None, False),
        ("Manager", "m", "b", None, True),
        ("Manager", "m", "b", "s", True),
        ("Admin", "a", "a", None, False),
    ],
)
def test_authorize_matrix(role, actor, owner, owner_supervisor, allowed):
    decision = authorize(role, actor, owner, owner_supervisor)
    assert decision.allowed is allowed
    assert bool(decision) is allowed
    assert decision.reason


def test_denied_decision_explains_why():
    decision = authorize("User", "a", "b", None)
    assert decision == Decision(False, "You can only manage your own tasks")


def test_unknown_role_is_named_in_reason():
    assert "Admin" in authorize("Admin", "a", "a", None).reason
