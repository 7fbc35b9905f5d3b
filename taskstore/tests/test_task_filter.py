from taskstore.domain.value_objects.task_filter import WILDCARD, TaskFilter


def test_zero_means_no_constraint():
    task_filter = TaskFilter.from_ids(0, 0)

    assert task_filter.is_unfiltered
    assert task_filter == TaskFilter()


def test_none_means_no_constraint():
    assert TaskFilter.from_ids(None, None).is_unfiltered


def test_bind_params_compile_none_to_wildcard():
    task_filter = TaskFilter.from_ids(3, None)

    assert task_filter.task_id == 3
    assert task_filter.author_id is None
    assert task_filter.bind_params() == {"task_id": 3, "author_id": WILDCARD}


def test_bind_params_keep_both_ids():
    assert TaskFilter(task_id=1, author_id=2).bind_params() == {
        "task_id": 1,
        "author_id": 2,
    }
