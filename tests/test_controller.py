"""Tests for the song feed controller."""

import asyncio

import pytest
from conftest import FakeSongRepository, make_song

from sendthesong.songs.controller import SongFeedController

DEBOUNCE = 0.05


def make_controller(repository, **kwargs) -> SongFeedController:
    kwargs.setdefault("debounce_seconds", DEBOUNCE)
    return SongFeedController(repository, **kwargs)


class Recorder:
    """Collects toasts and counts change notifications."""

    def __init__(self):
        self.toasts = []
        self.changes = 0

    async def on_toast(self, toast):
        self.toasts.append(toast)

    async def on_change(self):
        self.changes += 1


@pytest.mark.asyncio
async def test_initial_load_fetches_recent_page(fake_repository, seeded_songs):
    controller = make_controller(fake_repository, page_size=10)

    await controller.load_initial()

    assert fake_repository.list_calls == [10]
    assert controller.feed == seeded_songs
    assert controller.displayed == seeded_songs
    assert controller.most_recent == seeded_songs[0]


@pytest.mark.asyncio
async def test_initial_load_failure_shows_error_and_empty_feed(fake_repository):
    fake_repository.fail_reads = True
    recorder = Recorder()
    controller = make_controller(fake_repository, on_toast=recorder.on_toast)

    await controller.load_initial()

    assert controller.feed == []
    assert controller.most_recent is None
    assert len(recorder.toasts) == 1
    assert recorder.toasts[0].title == "Error fetching songs"
    assert recorder.toasts[0].description == "connection refused"
    assert recorder.toasts[0].variant == "destructive"


@pytest.mark.asyncio
async def test_search_is_debounced_to_last_keystroke(fake_repository):
    """Changing the query inside the quiet period issues one query for the final value."""
    controller = make_controller(fake_repository)
    await controller.load_initial()

    await controller.set_query("a")
    await controller.set_query("al")
    await controller.set_query("ale")
    await controller.settle()

    assert fake_repository.searches == ["ale"]
    assert [s.recipient_name for s in controller.displayed] == ["Alex", "alexandra"]


@pytest.mark.asyncio
async def test_search_waits_for_quiet_period(fake_repository):
    controller = make_controller(fake_repository, debounce_seconds=0.2)
    await controller.load_initial()

    await controller.set_query("sam")
    await asyncio.sleep(0.05)
    assert fake_repository.searches == []

    await controller.settle()
    assert fake_repository.searches == ["sam"]
    await controller.close()


@pytest.mark.asyncio
async def test_display_keeps_previous_list_until_results_arrive(fake_repository, seeded_songs):
    controller = make_controller(fake_repository)
    await controller.load_initial()

    await controller.set_query("sam")
    assert controller.displayed == seeded_songs

    await controller.settle()
    assert [s.recipient_name for s in controller.displayed] == ["Sam"]


@pytest.mark.asyncio
async def test_clearing_query_reverts_to_feed_without_remote_call(fake_repository, seeded_songs):
    controller = make_controller(fake_repository)
    await controller.load_initial()
    await controller.set_query("sam")
    await controller.settle()
    calls_before = (list(fake_repository.list_calls), list(fake_repository.searches))

    await controller.set_query("")
    await controller.settle()

    assert controller.displayed == seeded_songs
    assert controller.displayed is controller.feed
    assert (fake_repository.list_calls, fake_repository.searches) == calls_before


@pytest.mark.asyncio
async def test_loading_flag_during_search(fake_repository):
    fake_repository.search_delays["sam"] = 0.1
    controller = make_controller(fake_repository)
    await controller.load_initial()

    await controller.set_query("sam")
    await asyncio.sleep(DEBOUNCE + 0.03)
    assert controller.loading is True

    await controller.settle()
    assert controller.loading is False


@pytest.mark.asyncio
async def test_stale_search_response_is_discarded(fake_repository):
    """A slow response for an older query never overwrites a newer result."""
    fake_repository.search_delays["alex"] = 0.3
    controller = make_controller(fake_repository)
    await controller.load_initial()

    await controller.set_query("alex")
    # Let the debounce fire so the slow request is in flight
    await asyncio.sleep(DEBOUNCE + 0.05)
    await controller.set_query("sam")
    await controller.settle()

    assert fake_repository.searches == ["alex", "sam"]
    assert [s.recipient_name for s in controller.displayed] == ["Sam"]
    assert controller.loading is False


@pytest.mark.asyncio
async def test_in_flight_search_ignored_after_clearing(fake_repository, seeded_songs):
    fake_repository.search_delays["sam"] = 0.2
    controller = make_controller(fake_repository)
    await controller.load_initial()

    await controller.set_query("sam")
    await asyncio.sleep(DEBOUNCE + 0.05)
    await controller.set_query("")
    await controller.settle()

    assert controller.displayed == seeded_songs
    assert controller.loading is False


@pytest.mark.asyncio
async def test_search_failure_keeps_stale_list(fake_repository, seeded_songs):
    recorder = Recorder()
    controller = make_controller(fake_repository, on_toast=recorder.on_toast)
    await controller.load_initial()

    fake_repository.fail_reads = True
    await controller.set_query("sam")
    await controller.settle()

    assert controller.displayed == seeded_songs
    assert controller.loading is False
    assert [t.title for t in recorder.toasts] == ["Error fetching songs"]


@pytest.mark.asyncio
async def test_add_submitted_prepends_without_refetch(fake_repository, seeded_songs):
    controller = make_controller(fake_repository)
    await controller.load_initial()
    song = make_song(4, "Jordan")

    await controller.add_submitted(song)

    assert controller.feed[0] == song
    assert controller.displayed[0] == song
    assert controller.most_recent == song
    assert fake_repository.list_calls == [10]


@pytest.mark.asyncio
async def test_most_recent_ignores_search(fake_repository, seeded_songs):
    controller = make_controller(fake_repository)
    await controller.load_initial()

    await controller.set_query("sam")
    await controller.settle()

    assert controller.most_recent == seeded_songs[0]


@pytest.mark.asyncio
async def test_on_change_called_for_state_changes(fake_repository):
    recorder = Recorder()
    controller = make_controller(fake_repository, on_change=recorder.on_change)

    await controller.load_initial()
    assert recorder.changes == 1

    await controller.set_query("sam")
    await controller.settle()
    # query change, loading on, results in
    assert recorder.changes == 4


@pytest.mark.asyncio
async def test_same_query_does_not_restart_timer():
    repository = FakeSongRepository()
    controller = make_controller(repository)

    await controller.set_query("x")
    await controller.set_query("x")
    await controller.settle()

    assert repository.searches == ["x"]


@pytest.mark.asyncio
async def test_close_cancels_pending_search(fake_repository):
    controller = make_controller(fake_repository, debounce_seconds=1)

    await controller.set_query("sam")
    await controller.close()

    assert fake_repository.searches == []


def test_snapshot_uses_camel_case(seeded_songs):
    controller = make_controller(FakeSongRepository())
    controller.feed = seeded_songs

    snapshot = controller.snapshot()

    assert snapshot["query"] == ""
    assert snapshot["loading"] is False
    assert snapshot["mostRecent"]["recipientName"] == "Alex"
    assert snapshot["displayed"][0]["youtubeUrl"] == "https://youtu.be/abc12345678"
    assert len(snapshot["feed"]) == 3
