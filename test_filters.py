from filters import filter_tasks
from schemas import Task, TaskFilter, AssigneeRef, TaskStatus, TaskPriority


def make_tasks():
    return [
        Task(id=1, title="Design landing page", description="Hero and footer",
             status=TaskStatus.IN_PROGRESS, priority=TaskPriority.HIGH,
             project_id=1, assignee=AssigneeRef(id=1)),
        Task(id=2, title="Fix login bug", description="Safari only",
             status=TaskStatus.TODO, priority=TaskPriority.URGENT, project_id=2),
        Task(id=3, title="Write docs", description="API reference for the landing service",
             status=TaskStatus.COMPLETED, priority=TaskPriority.LOW,
             assignee=AssigneeRef(id=2)),
        Task(id=4, title="Plan sprint", status=TaskStatus.TODO, priority=TaskPriority.HIGH,
             project_id=1, assignee=AssigneeRef(id=1)),
    ]


def ids(tasks):
    return [t.id for t in tasks]


def test_identity_filter_returns_input_in_order():
    tasks = make_tasks()
    identity = {"status": "all", "priority": "all", "projectId": "all",
                "assignee": "all", "searchText": ""}
    assert filter_tasks(tasks, identity) == tasks
    assert filter_tasks(tasks) == tasks


def test_search_matches_title_or_description_case_insensitive():
    assert ids(filter_tasks(make_tasks(), TaskFilter(search_text="LANDING"))) == [1, 3]


def test_filters_combine_with_and():
    predicates = TaskFilter(status="To Do", priority="High")
    assert ids(filter_tasks(make_tasks(), predicates)) == [4]


def test_project_and_assignee_filters():
    assert ids(filter_tasks(make_tasks(), TaskFilter(project_id=1))) == [1, 4]
    assert ids(filter_tasks(make_tasks(), TaskFilter(assignee=2))) == [3]


def test_missing_field_never_matches_concrete_value():
    # task 3 has no project, task 2 has no assignee
    assert 3 not in ids(filter_tasks(make_tasks(), TaskFilter(project_id=2)))
    assert 2 not in ids(filter_tasks(make_tasks(), TaskFilter(assignee=1)))


def test_filter_is_idempotent_and_does_not_mutate():
    tasks = make_tasks()
    snapshot = [t.model_copy() for t in tasks]
    predicates = TaskFilter(priority="High")
    once = filter_tasks(tasks, predicates)
    assert filter_tasks(once, predicates) == once
    assert filter_tasks(tasks, predicates) == once
    assert tasks == snapshot
    assert once is not tasks


def test_string_query_values_are_coerced():
    predicates = TaskFilter(project_id="1", assignee="all", status="all")
    assert ids(filter_tasks(make_tasks(), predicates)) == [1, 4]
