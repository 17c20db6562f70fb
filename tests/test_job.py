"""TDD: PipelineJob state machine tests written FIRST"""
import pytest

from transcoder.errors import InvalidTransition
from transcoder.pipeline.job import PipelineJob, Stage


def test_new_job_is_idle():
    job = PipelineJob(source="file:///x.ogg")

    assert job.stage is Stage.IDLE
    assert job.detected_format is None
    assert job.result is None
    assert not job.is_terminal


def test_happy_path_transitions_are_recorded():
    job = PipelineJob(source="file:///x.ogg")

    list(map(job.advance, [Stage.DETECTING, Stage.PREPARING, Stage.TRANSCRIBING, Stage.COMPLETED]))

    assert job.transitions == [
        (Stage.IDLE, Stage.DETECTING),
        (Stage.DETECTING, Stage.PREPARING),
        (Stage.PREPARING, Stage.TRANSCRIBING),
        (Stage.TRANSCRIBING, Stage.COMPLETED),
    ]
    assert job.is_terminal


def test_stages_cannot_be_skipped():
    job = PipelineJob(source="file:///x.ogg")
    job.advance(Stage.DETECTING)

    with pytest.raises(InvalidTransition):
        job.advance(Stage.TRANSCRIBING)


@pytest.mark.parametrize("path", [
    [],
    [Stage.DETECTING],
    [Stage.DETECTING, Stage.PREPARING],
    [Stage.DETECTING, Stage.PREPARING, Stage.TRANSCRIBING],
])
def test_fail_from_any_non_terminal_stage(path):
    job = PipelineJob(source="file:///x.ogg")
    list(map(job.advance, path))

    job.fail("boom")

    assert job.stage is Stage.FAILED
    assert job.failure_reason == "boom"


def test_failed_job_cannot_resume():
    job = PipelineJob(source="file:///x.ogg")
    job.fail("boom")

    with pytest.raises(InvalidTransition):
        job.advance(Stage.DETECTING)
    with pytest.raises(InvalidTransition):
        job.fail("again")


def test_completed_job_cannot_fail():
    job = PipelineJob(source="file:///x.ogg")
    list(map(job.advance, [Stage.DETECTING, Stage.PREPARING, Stage.TRANSCRIBING, Stage.COMPLETED]))

    with pytest.raises(InvalidTransition):
        job.fail("late")
