from types import SimpleNamespace

from app.utils.rank_utils import UNRANKED_PRIORITY, get_rank_priority, sort_users_by_rank


def test_chief_first_and_same_rank_keeps_input_order():
    users = [{"rank": "EMT", "id": 1}, {"rank": "Chief", "id": 2}, {"rank": "EMT", "id": 3}]
    assert [u["id"] for u in sort_users_by_rank(users)] == [2, 1, 3]


def test_sort_returns_new_list():
    users = [{"rank": "Intern", "id": 1}, {"rank": "Captain", "id": 2}]
    result = sort_users_by_rank(users)
    assert result is not users
    assert [u["id"] for u in users] == [1, 2]


def test_full_precedence_order():
    ranks = [
        "Probationary Cadet",
        "Intern",
        "EMT",
        "Doctor",
        "Paramedic",
        "Sr. EMT",
        "Lieutenant",
        "Captain",
        "Head of Surgery",
        "",
    ]
    users = [SimpleNamespace(rank=rank, id=i) for i, rank in enumerate(ranks)]
    ordered = [u.rank for u in sort_users_by_rank(users)]
    assert ordered == [
        "Head of Surgery",
        "Captain",
        "Lieutenant",
        "Sr. EMT",
        "Paramedic",
        "Doctor",
        "EMT",
        "Intern",
        "Probationary Cadet",
        "",
    ]


def test_rank_matching_is_case_insensitive():
    assert get_rank_priority("deputy CHIEF") == get_rank_priority("Chief")
    assert get_rank_priority("senior paramedic") > get_rank_priority("paramedic")


def test_unknown_and_missing_ranks_sort_last():
    assert get_rank_priority(None) == UNRANKED_PRIORITY
    assert get_rank_priority("Volunteer") == UNRANKED_PRIORITY
    users = [SimpleNamespace(rank=None, id=1), SimpleNamespace(rank="Intern", id=2)]
    assert [u.id for u in sort_users_by_rank(users)] == [2, 1]


def test_sr_prefix_outranks_paramedic_and_doctor():
    assert get_rank_priority("Sr. EMT") == 70
    users = [{"rank": "Doctor", "id": 1}, {"rank": "Paramedic", "id": 2}, {"rank": "Sr. EMT", "id": 3}]
    assert [u["id"] for u in sort_users_by_rank(users)] == [3, 2, 1]
