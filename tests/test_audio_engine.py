from luckywheel.audio.engine import AudioEngine, get_audio_engine


def test_uninitialized_engine_is_silent():
    engine = AudioEngine()
    assert not engine.is_initialized
    assert engine.play("tick") is None
    engine.play_tick()
    engine.play_win_cue()
    engine.start_ambience()
    assert not engine.is_ambience_playing()
    engine.stop_ambience()
    engine.cleanup()


def test_volumes_are_clamped():
    engine = AudioEngine()
    assert engine.get_volumes() == (0.5, 0.5)
    engine.set_volumes(1.7, -0.2)
    assert engine.get_volumes() == (1.0, 0.0)


def test_mute_toggle_without_mixer():
    engine = AudioEngine()
    engine.set_muted(True)
    assert engine.is_muted()
    engine.start_ambience()
    assert not engine.is_ambience_playing()
    engine.set_muted(False)
    assert not engine.is_muted()


def test_singleton():
    assert get_audio_engine() is get_audio_engine()
