"""Tests for the SQL task hub adapters (SqlHistoryStorage, SqlTaskHubClient)."""

import json

import pytest
import pytest_asyncio
from sqlalchemy import select

from core.domain.enums import HistoryEventType, OrchestrationRuntimeStatus
from core.domain.errors import InstanceNotFoundError, StorageError
from core.infrastructure.adapters.durable import ControlMessageType, SqlTaskHubClient
from core.infrastructure.database.history_storage import SqlHistoryStorage
from core.infrastructure.database.models import ControlMessageModel, HistoryModel, InstanceModel
from tests.mocks.history_factory import T0, at


HUB = "TestHub"


def _history_row(instance_id: str, seq: int, event_type: HistoryEventType, ms: int, **kwargs) -> HistoryModel:
    return HistoryModel(
        task_hub=kwargs.pop("task_hub", HUB),
        instance_id=instance_id,
        sequence_number=seq,
        event_type=event_type.value,
        timestamp=at(ms),
        **kwargs,
    )


@pytest_asyncio.fixture
async def seeded(test_session_factory):
    """Parent with one activity and one child, plus rows that must be filtered out."""
    async with test_session_factory() as session:
        session.add_all([
            InstanceModel(
                task_hub=HUB,
                instance_id="parent-1",
                name="Parent",
                runtime_status="Completed",
                input=json.dumps({"city": "Seattle"}),
                output=json.dumps("done"),
                created_time=T0,
                last_updated_time=at(2000),
            ),
            InstanceModel(
                task_hub="OtherHub",
                instance_id="parent-1",
                name="Elsewhere",
                runtime_status="Running",
                created_time=T0,
                last_updated_time=T0,
            ),
            _history_row("parent-1", 3, HistoryEventType.SUB_ORCHESTRATION_COMPLETED, 1500,
                         name="Child", scheduled_time=at(500), event_id=1),
            _history_row("parent-1", 0, HistoryEventType.EXECUTION_STARTED, 0, name="Parent", event_id=-1),
            _history_row("parent-1", 1, HistoryEventType.TASK_COMPLETED, 250,
                         name="SayHello", scheduled_time=at(100), result=json.dumps("Hello"), event_id=0),
            _history_row("parent-1", 2, HistoryEventType.SUB_ORCHESTRATION_CREATED, 500,
                         name="Child", child_instance_id="child-1", event_id=1),
            _history_row("parent-1", 4, HistoryEventType.EXECUTION_COMPLETED, 2000, event_id=2),
            _history_row("parent-1", 0, HistoryEventType.SUB_ORCHESTRATION_CREATED, 500,
                         task_hub="OtherHub", name="Child", child_instance_id="foreign-child"),
        ])
        await session.commit()
    return test_session_factory


# =============================================================================
# SqlHistoryStorage
# =============================================================================

@pytest.mark.asyncio
async def test_query_child_creation_records(seeded):
    """Test only the parent's creation rows in the same task hub are returned."""
    storage = SqlHistoryStorage(seeded)

    records = await storage.query_child_creation_records(HUB, "parent-1")

    assert len(records) == 1
    assert records[0].name == "Child"
    assert records[0].instance_id == "child-1"
    assert records[0].creation_time == at(500)


@pytest.mark.asyncio
async def test_query_child_creation_records_for_unknown_parent(seeded):
    """Test an unknown parent has no child records."""
    storage = SqlHistoryStorage(seeded)

    assert await storage.query_child_creation_records(HUB, "nobody") == []


@pytest.mark.asyncio
async def test_instance_record_read_replace(seeded):
    """Test a replaced record is read back, other columns intact."""
    storage = SqlHistoryStorage(seeded)

    record = await storage.read_instance_record(HUB, "parent-1")
    record.custom_status = json.dumps({"stage": 3})
    await storage.replace_instance_record(record)

    reread = await storage.read_instance_record(HUB, "parent-1")
    assert json.loads(reread.custom_status) == {"stage": 3}
    assert json.loads(reread.input) == {"city": "Seattle"}
    assert reread.last_updated_time == at(2000)

    other = await storage.read_instance_record("OtherHub", "parent-1")
    assert other.custom_status is None


@pytest.mark.asyncio
async def test_read_missing_record(seeded):
    """Test a missing row reads as None."""
    assert await SqlHistoryStorage(seeded).read_instance_record(HUB, "ghost") is None


@pytest.mark.asyncio
async def test_replace_missing_record(seeded):
    """Test replacing a vanished row raises StorageError."""
    storage = SqlHistoryStorage(seeded)
    record = await storage.read_instance_record(HUB, "parent-1")
    record.instance_id = "ghost"

    with pytest.raises(StorageError):
        await storage.replace_instance_record(record)


# =============================================================================
# SqlTaskHubClient
# =============================================================================

async def _messages(session_factory):
    async with session_factory() as session:
        result = await session.execute(select(ControlMessageModel).order_by(ControlMessageModel.id))
        return result.scalars().all()


@pytest.mark.asyncio
async def test_get_status_with_history(seeded):
    """Test status and history come back in sequence order."""
    client = SqlTaskHubClient(seeded, HUB)

    status = await client.get_status("parent-1", show_history=True, show_history_output=True)

    assert status.name == "Parent"
    assert status.runtime_status == OrchestrationRuntimeStatus.COMPLETED
    assert status.input == {"city": "Seattle"}
    assert status.output == "done"
    assert status.created_time == T0
    assert [e.event_type for e in status.history] == [
        "ExecutionStarted",
        "TaskCompleted",
        "SubOrchestrationInstanceCreated",
        "SubOrchestrationInstanceCompleted",
        "ExecutionCompleted",
    ]
    assert status.history[1].result == "Hello"
    assert status.history[1].scheduled_time == at(100)
    assert status.history[2].details["InstanceId"] == "child-1"


@pytest.mark.asyncio
async def test_get_status_flags(seeded):
    """Test history, history output and input are only included on request."""
    client = SqlTaskHubClient(seeded, HUB)

    bare = await client.get_status("parent-1", show_input=False)
    assert bare.history is None
    assert bare.input is None

    quiet = await client.get_status("parent-1", show_history=True)
    assert quiet.history[1].result is None


@pytest.mark.asyncio
async def test_get_status_missing(seeded):
    """Test unknown instances read as None."""
    assert await SqlTaskHubClient(seeded, HUB).get_status("ghost") is None


@pytest.mark.asyncio
async def test_purge(seeded):
    """Test purge removes the instance and its history, nothing else."""
    client = SqlTaskHubClient(seeded, HUB)

    assert await client.purge_instance_history("parent-1") == 1
    assert await client.get_status("parent-1") is None
    assert await SqlTaskHubClient(seeded, "OtherHub").get_status("parent-1") is not None
    assert await client.purge_instance_history("parent-1") == 0


@pytest.mark.asyncio
async def test_control_messages(seeded):
    """Test mutating primitives are queued for the runtime."""
    client = SqlTaskHubClient(seeded, HUB)

    await client.terminate("parent-1", "stuck")
    await client.rewind("parent-1", "retry")
    await client.raise_event("parent-1", "Approve", {"by": "bob"})
    await client.signal_entity("Counter", "abc", "add", 5)

    messages = await _messages(seeded)
    assert [(m.instance_id, m.message_type, m.payload) for m in messages] == [
        ("parent-1", ControlMessageType.EXECUTION_TERMINATED.value, {"reason": "stuck"}),
        ("parent-1", ControlMessageType.EXECUTION_REWOUND.value, {"reason": "retry"}),
        ("parent-1", ControlMessageType.EVENT_RAISED.value, {"name": "Approve", "input": {"by": "bob"}}),
        ("@counter@abc", ControlMessageType.ENTITY_OPERATION_SIGNALED.value, {"operation": "add", "input": 5}),
    ]
    assert all(m.task_hub == HUB for m in messages)


@pytest.mark.asyncio
async def test_restart(seeded):
    """Test restart replays the original input under a new or the same id."""
    client = SqlTaskHubClient(seeded, HUB)

    new_id = await client.restart("parent-1", restart_with_new_instance_id=True)
    same_id = await client.restart("parent-1", restart_with_new_instance_id=False)

    assert new_id != "parent-1"
    assert same_id == "parent-1"

    messages = await _messages(seeded)
    assert [m.instance_id for m in messages] == [new_id, "parent-1"]
    assert messages[0].message_type == ControlMessageType.EXECUTION_STARTED.value
    assert messages[0].payload == {"name": "Parent", "input": {"city": "Seattle"}, "restartedFrom": "parent-1"}


@pytest.mark.asyncio
async def test_restart_missing(seeded):
    """Test restarting an unknown instance raises InstanceNotFoundError."""
    with pytest.raises(InstanceNotFoundError):
        await SqlTaskHubClient(seeded, HUB).restart("ghost")
