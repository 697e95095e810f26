from __future__ import annotations

from fakes import FakePlayer

from encore.audio.channel import AudioChannel


def test_play_returns_live_handle(channel: AudioChannel, player: FakePlayer) -> None:
    handle = channel.play("a.wav", 1.5, on_complete=lambda: None)

    assert handle is not None
    assert channel.live_handle is handle
    assert channel.is_playing(handle)
    assert player.played_sources() == ["a.wav"]
    assert player.rate == 1.5


def test_starting_new_asset_stops_previous(channel: AudioChannel, player: FakePlayer) -> None:
    completed: list[str] = []
    first = channel.play("a.wav", 1.0, on_complete=lambda: completed.append("a"))
    second = channel.play("b.wav", 1.0, on_complete=lambda: completed.append("b"))

    assert first is not second
    assert channel.live_handle is second
    assert not channel.is_playing(first)
    assert ("stop",) in player.calls

    player.fire_finished(first.id)
    assert completed == []

    player.finish()
    assert completed == ["b"]


def test_failed_start_returns_no_handle() -> None:
    player = FakePlayer(fail_on=("missing.wav",))
    channel = AudioChannel(lambda: player)

    assert channel.play("missing.wav", 1.0, on_complete=lambda: None) is None
    assert channel.live_handle is None


def test_player_factory_failure_returns_no_handle() -> None:
    def _factory():
        raise RuntimeError("no output device")

    channel = AudioChannel(_factory)

    assert channel.play("a.wav", 1.0, on_complete=lambda: None) is None


def test_completion_fires_once(channel: AudioChannel, player: FakePlayer) -> None:
    completed: list[int] = []
    handle = channel.play("a.wav", 1.0, on_complete=lambda: completed.append(1))

    player.fire_finished(handle.id)
    player.fire_finished(handle.id)

    assert completed == [1]
    assert channel.live_handle is None


def test_completion_after_stop_is_ignored(channel: AudioChannel, player: FakePlayer) -> None:
    completed: list[int] = []
    handle = channel.play("a.wav", 1.0, on_complete=lambda: completed.append(1))

    channel.stop(handle)
    player.fire_finished(handle.id)

    assert completed == []


def test_stop_with_stale_handle_keeps_live_audio(channel: AudioChannel, player: FakePlayer) -> None:
    first = channel.play("a.wav", 1.0, on_complete=lambda: None)
    second = channel.play("b.wav", 1.0, on_complete=lambda: None)
    stops_before = player.calls.count(("stop",))

    channel.stop(first)

    assert channel.live_handle is second
    assert player.calls.count(("stop",)) == stops_before


def test_set_rate_applies_only_to_live_handle(channel: AudioChannel, player: FakePlayer) -> None:
    first = channel.play("a.wav", 1.0, on_complete=lambda: None)
    second = channel.play("b.wav", 1.0, on_complete=lambda: None)

    channel.set_rate(first, 2.0)
    assert player.rate == 1.0

    channel.set_rate(second, 2.0)
    assert player.rate == 2.0
    assert second.rate == 2.0


def test_completion_is_marshalled_through_dispatch(player: FakePlayer) -> None:
    queued = []
    channel = AudioChannel(lambda: player, dispatch=lambda func, *args: queued.append((func, args)))
    completed: list[int] = []
    channel.play("a.wav", 1.0, on_complete=lambda: completed.append(1))

    player.finish()
    assert completed == []

    func, args = queued.pop()
    func(*args)
    assert completed == [1]


def test_close_stops_and_releases_player(channel: AudioChannel, player: FakePlayer) -> None:
    completed: list[int] = []
    handle = channel.play("a.wav", 1.0, on_complete=lambda: completed.append(1))

    channel.close()
    player.fire_finished(handle.id)

    assert channel.live_handle is None
    assert completed == []


def test_failure_runs_failure_handler_once(channel: AudioChannel, player: FakePlayer) -> None:
    events: list[str] = []
    handle = channel.play(
        "a.wav",
        1.0,
        on_complete=lambda: events.append("complete"),
        on_failed=lambda: events.append("failed"),
    )

    player.fail()
    player.fire_failed(handle.id)
    player.fire_finished(handle.id)

    assert events == ["failed"]
    assert channel.live_handle is None
    assert not channel.is_playing(handle)


def test_failure_of_replaced_asset_is_ignored(channel: AudioChannel, player: FakePlayer) -> None:
    events: list[str] = []
    first = channel.play("a.wav", 1.0, on_complete=lambda: None, on_failed=lambda: events.append("a"))
    second = channel.play("b.wav", 1.0, on_complete=lambda: None, on_failed=lambda: events.append("b"))

    player.fire_failed(first.id)

    assert events == []
    assert channel.live_handle is second
