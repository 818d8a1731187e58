from __future__ import annotations

import pytest

from conftest import FakeDynamoDB, RecordingDocumentStore, StringSerializer
from dynadoc.docstore.core.batch_builder import BatchBuilder
from dynadoc.docstore.core.document_store import DynamoDBDocumentStore
from dynadoc.docstore.core.entity_store import EntityStore
from dynadoc.docstore.core.transaction import NO_RETRY, retry, transaction
from dynadoc.docstore.exceptions import UpdateConflictError
from dynadoc.docstore.models import DocumentKey, JsonEntity

KEY = DocumentKey("pk", "sk")


class CountingWork:
    """Unit of work modifying KEY, recording the builders it was given."""

    def __init__(self, result: str = "done"):
        self.result = result
        self.builders: list[BatchBuilder] = []

    def __call__(self, builder: BatchBuilder) -> str:
        self.builders.append(builder)
        builder.modify(JsonEntity(KEY, f"attempt {len(self.builders)}", 1))
        return self.result


@pytest.fixture
def documents() -> RecordingDocumentStore:
    return RecordingDocumentStore()


@pytest.fixture
def entities(documents: RecordingDocumentStore) -> EntityStore:
    return EntityStore(documents, StringSerializer())


def test_successful_transaction_runs_once(entities: EntityStore, documents: RecordingDocumentStore) -> None:
    work = CountingWork()

    assert transaction(entities, work) == "done"

    assert len(work.builders) == 1
    assert len(documents.updates) == 1


def test_no_retry_raises_first_conflict(entities: EntityStore, documents: RecordingDocumentStore) -> None:
    documents.always_fail_with = UpdateConflictError(KEY)
    work = CountingWork()

    with pytest.raises(UpdateConflictError):
        transaction(entities, work, NO_RETRY)

    assert len(work.builders) == 1


def test_retry_until_success(entities: EntityStore, documents: RecordingDocumentStore) -> None:
    documents.errors = [UpdateConflictError(KEY), UpdateConflictError(KEY), None]
    work = CountingWork()

    assert transaction(entities, work, retry(3)) == "done"

    assert len(work.builders) == 3
    ((updated, _),) = documents.updates[-1:]
    assert updated[0].body == StringSerializer.json_for("attempt 3")


@pytest.mark.parametrize("max_retries", [0, 1, 4])
def test_retry_gives_up_after_max_retries(
    entities: EntityStore, documents: RecordingDocumentStore, max_retries: int
) -> None:
    documents.always_fail_with = UpdateConflictError(KEY)
    work = CountingWork()

    with pytest.raises(UpdateConflictError):
        transaction(entities, work, retry(max_retries))

    assert len(work.builders) == max_retries + 1


@pytest.mark.parametrize("max_retries", [0, 2, 3])
def test_permanent_conflict_calls_dynamodb_n_plus_one_times(
    store: DynamoDBDocumentStore, dynamodb: FakeDynamoDB, max_retries: int
) -> None:
    entities = EntityStore(store, StringSerializer())

    def work(builder: BatchBuilder) -> None:
        # The document does not exist, so version 5 never matches
        builder.modify(JsonEntity(KEY, "value", 5))

    with pytest.raises(UpdateConflictError) as info:
        transaction(entities, work, retry(max_retries))

    assert info.value.key == KEY
    assert dynamodb.calls.count("TransactWriteItems") == max_retries + 1
    assert dynamodb.items == {}


def test_each_attempt_gets_a_fresh_builder(entities: EntityStore, documents: RecordingDocumentStore) -> None:
    documents.errors = [UpdateConflictError(KEY), None]
    work = CountingWork()

    transaction(entities, work, retry(1))

    first, second = work.builders
    assert first is not second
    # The second attempt does not inherit the failed attempt's modifications
    assert [len(updated) for updated, _ in documents.updates] == [1, 1]


def test_work_failure_aborts_without_submit(entities: EntityStore, documents: RecordingDocumentStore) -> None:
    def work(builder: BatchBuilder) -> None:
        builder.modify(JsonEntity(KEY, "value", 1))
        raise ValueError("invalid input")

    with pytest.raises(ValueError, match="invalid input"):
        transaction(entities, work, retry(5))

    assert documents.updates == []


def test_retry_ignores_other_errors(entities: EntityStore, documents: RecordingDocumentStore) -> None:
    documents.always_fail_with = RuntimeError("throttled")
    work = CountingWork()

    with pytest.raises(RuntimeError):
        transaction(entities, work, retry(5))

    assert len(work.builders) == 1


def test_custom_policy_sees_failure_counts(entities: EntityStore, documents: RecordingDocumentStore) -> None:
    documents.errors = [RuntimeError("one"), RuntimeError("two"), None]
    seen: list[tuple[str, int]] = []

    def policy(error: Exception, failure_count: int) -> bool:
        seen.append((str(error), failure_count))
        return True

    transaction(entities, CountingWork(), policy)

    assert seen == [("one", 1), ("two", 2)]


def test_retry_pauses_between_attempts(
    entities: EntityStore, documents: RecordingDocumentStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    pauses: list[float] = []
    monkeypatch.setattr("dynadoc.docstore.core.transaction.time.sleep", pauses.append)
    documents.errors = [UpdateConflictError(KEY), UpdateConflictError(KEY), None]

    transaction(entities, CountingWork(), retry(2, pause=0.25))

    assert pauses == [0.25, 0.25]


def test_retry_policy_contract() -> None:
    policy = retry(2)
    conflict = UpdateConflictError(KEY)

    assert policy(conflict, 1)
    assert policy(conflict, 2)
    assert not policy(conflict, 3)
    assert not policy(RuntimeError(), 1)
    assert not NO_RETRY(conflict, 1)
