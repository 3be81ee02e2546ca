from datetime import datetime, timedelta, timezone

from ranker.services.activity import ActivityItem, ActivityKind, merge_activity, paginate

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _item(kind, n, minutes):
    return ActivityItem(kind=kind, id=f"{kind.value}-{n}", created_at=T0 + timedelta(minutes=minutes), payload={})


def test_merge_is_newest_first_across_both_sides():
    ratings = [_item(ActivityKind.RATING, 1, 5), _item(ActivityKind.RATING, 2, 1)]
    comments = [_item(ActivityKind.COMMENT, 1, 3), _item(ActivityKind.COMMENT, 2, 7)]

    merged = merge_activity(ratings, comments)
    assert [i.id for i in merged] == ["comment-2", "rating-1", "comment-1", "rating-2"]


def test_merge_handles_naive_timestamps():
    naive = ActivityItem(ActivityKind.RATING, "rating-1", datetime(2024, 1, 1, 0, 10), {})
    aware = _item(ActivityKind.COMMENT, 1, 5)
    assert [i.id for i in merge_activity([naive], [aware])] == ["rating-1", "comment-1"]


def test_merge_of_two_empty_sides_is_empty():
    assert merge_activity([], []) == []


def test_paginating_merged_windows_matches_paginating_everything():
    ratings = [_item(ActivityKind.RATING, n, n * 3) for n in range(10)]
    comments = [_item(ActivityKind.COMMENT, n, n * 5 + 1) for n in range(10)]
    full = merge_activity(ratings, comments)

    newest_ratings = sorted(ratings, key=lambda i: i.created_at, reverse=True)
    newest_comments = sorted(comments, key=lambda i: i.created_at, reverse=True)
    for skip in range(0, 20, 3):
        take = 4
        window = skip + take
        page = paginate(
            merge_activity(newest_ratings[:window], newest_comments[:window]), skip, take
        )
        assert page == full[skip:skip + take]


def test_paginate_past_the_end_is_empty():
    items = [_item(ActivityKind.RATING, n, n) for n in range(3)]
    assert paginate(items, 5, 10) == []
    assert paginate(items, 1, 1) == [items[1]]


def test_to_dict_shape():
    item = _item(ActivityKind.COMMENT, 9, 0)
    assert item.to_dict() == {"id": "comment-9", "type": "comment", "created_at": T0, "content": {}}
