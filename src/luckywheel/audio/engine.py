"""
LuckyWheel Audio Engine - synthesized spin cues on pygame.mixer.

Provides the tick played on every slice crossing, the win fanfare and
the background ambience that runs while the wheel spins. Every call is
safe when the mixer is unavailable: the wheel never depends on sound.
"""

import pygame
import array
import math
import random
import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
MUSIC_CHANNEL = 0


def square(t: float, freq: float) -> float:
    return 1.0 if math.fmod(t * freq, 1.0) < 0.5 else -1.0


def sine(t: float, freq: float) -> float:
    return math.sin(2 * math.pi * freq * t)


def noise() -> float:
    return random.uniform(-1.0, 1.0)


class AudioEngine:
    """
    Sound cues for the prize wheel.

    Two volume buses: music (ambience) and effects (tick, win cue).
    Muting pauses the mixer and suppresses new cues.
    """

    def __init__(self):
        self._initialized = False
        self._sounds: Dict[str, pygame.mixer.Sound] = {}
        self._tracks: Dict[str, pygame.mixer.Sound] = {}
        self._volume_music = 0.5
        self._volume_sfx = 0.5
        self._muted = False
        self._music_channel: Optional[pygame.mixer.Channel] = None
        self._ambience_playing = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def init(self) -> bool:
        """Initialize the mixer and synthesize the cues."""
        try:
            pygame.mixer.pre_init(SAMPLE_RATE, -16, 2, 1024)
            pygame.mixer.init()
            pygame.mixer.set_num_channels(8)
            pygame.mixer.set_reserved(1)  # Channel 0 is kept for ambience
            self._initialized = True
            logger.info(f"Mixer ready at {SAMPLE_RATE} Hz")
        except Exception as e:
            logger.error(f"Mixer unavailable: {e}")
            return False

        self._gen_tick()
        self._gen_win()
        self._gen_ambience()
        logger.info(f"Synthesized cues: {', '.join(self._sounds)}")
        return True

    def _create_sound(self, samples: array.array) -> pygame.mixer.Sound:
        """Wrap mono 16-bit samples as a stereo Sound."""
        interleaved = array.array("h", (s for sample in samples for s in (sample, sample)))
        return pygame.mixer.Sound(buffer=interleaved)

    # ===== SYNTHESIZED CUES =====

    def _gen_tick(self) -> None:
        """Short hoof-like knock for each slice boundary."""
        samples = array.array('h')
        for i in range(int(SAMPLE_RATE * 0.04)):
            t = i / SAMPLE_RATE
            env = max(0, 1 - t * 30)
            val = sine(t, 180) * 0.4 + noise() * 0.2 * max(0, 1 - t * 80)
            samples.append(int(val * env * 32767 * 0.7))
        self._sounds["tick"] = self._create_sound(samples)

    def _gen_win(self) -> None:
        """Ta-da: two short pickup notes, then a bright major chord."""
        samples = array.array('h')
        pickup = (392.0, 587.0)  # G4, D5
        chord = (784.0, 988.0, 1175.0)  # G5, B5, D6
        for i in range(int(SAMPLE_RATE * 1.0)):
            t = i / SAMPLE_RATE
            if t < 0.24:
                freq = pickup[0] if t < 0.12 else pickup[1]
                local = t % 0.12
                val = (square(t, freq) * 0.15 + sine(t, freq) * 0.15) * max(0, 1 - local * 6)
            else:
                decay = math.exp(-(t - 0.24) * 3.0)
                val = sum(sine(t, f) for f in chord) * 0.18 * decay
                val += square(t, chord[0]) * 0.05 * decay
            samples.append(int(max(-1.0, min(1.0, val)) * 32767))
        self._sounds["win"] = self._create_sound(samples)

    def _gen_ambience(self) -> None:
        """Drum roll loop used when no ambience track is configured."""
        samples = array.array('h')
        hit_interval = 0.06
        for i in range(int(SAMPLE_RATE * 2.0)):
            t = i / SAMPLE_RATE
            phase = t % hit_interval
            val = noise() * 0.18 * max(0, 1 - phase * 40)
            val += sine(t, 55) * 0.1
            samples.append(int(val * 32767))
        self._sounds["ambience"] = self._create_sound(samples)

    # ===== CUES =====

    def play(self, sound_name: str, volume: float = 1.0) -> Optional[pygame.mixer.Channel]:
        """Play an effect on the effects bus."""
        if not self._initialized or self._muted:
            return None

        sound = self._sounds.get(sound_name)
        if not sound:
            logger.warning(f"Unknown cue: {sound_name}")
            return None

        try:
            sound.set_volume(volume * self._volume_sfx)
            return sound.play()
        except Exception as e:
            logger.error(f"Failed to play {sound_name}: {e}")
            return None

    def play_tick(self) -> None:
        self.play("tick", volume=0.6)

    def play_win_cue(self) -> None:
        self.play("win")

    def start_ambience(self, track: Optional[Path] = None, duration_hint: float = 8.0) -> None:
        """Start background ambience for a spin.

        Args:
            track: Audio file to play; the synthesized loop is used if None
            duration_hint: Seconds to play before fading out on its own
        """
        if not self._initialized or self._muted:
            return

        sound = self._load_track(track) if track else None
        if sound is None:
            sound = self._sounds.get("ambience")
        if sound is None:
            return

        self.stop_ambience(fade_out_ms=0)
        try:
            self._music_channel = pygame.mixer.Channel(MUSIC_CHANNEL)
            self._music_channel.set_volume(self._volume_music)
            self._music_channel.play(
                sound,
                loops=-1,
                maxtime=int(duration_hint * 1000),
                fade_ms=300,
            )
            self._ambience_playing = True
            logger.debug(f"Ambience started ({duration_hint}s)")
        except Exception as e:
            logger.error(f"Failed to start ambience: {e}")

    def stop_ambience(self, fade_out_ms: int = 400) -> None:
        """Stop background ambience."""
        if self._music_channel is not None:
            try:
                if fade_out_ms > 0:
                    self._music_channel.fadeout(fade_out_ms)
                else:
                    self._music_channel.stop()
            except Exception as e:
                logger.debug(f"Ambience stop failed: {e}")
        self._ambience_playing = False

    def is_ambience_playing(self) -> bool:
        return self._ambience_playing

    def _load_track(self, track: Path) -> Optional[pygame.mixer.Sound]:
        key = str(track)
        if key in self._tracks:
            return self._tracks[key]
        try:
            sound = pygame.mixer.Sound(key)
        except Exception as e:
            logger.warning(f"Could not load ambience track {track}: {e}")
            return None
        self._tracks[key] = sound
        logger.info(f"Loaded ambience track: {track}")
        return sound

    # ===== VOLUME / MUTE =====

    def set_volumes(self, music: float, effects: float) -> None:
        """Set music and effects volume (0.0 - 1.0 each)."""
        self._volume_music = max(0.0, min(1.0, music))
        self._volume_sfx = max(0.0, min(1.0, effects))
        if self._music_channel is not None and self._ambience_playing:
            try:
                self._music_channel.set_volume(self._volume_music)
            except Exception as e:
                logger.debug(f"Volume update failed: {e}")

    def get_volumes(self) -> tuple[float, float]:
        return self._volume_music, self._volume_sfx

    def is_muted(self) -> bool:
        return self._muted

    def set_muted(self, muted: bool) -> None:
        """Mute or unmute all audio."""
        if muted == self._muted:
            return
        self._muted = muted
        if self._initialized:
            if muted:
                pygame.mixer.pause()
            else:
                pygame.mixer.unpause()
        logger.info("Audio muted" if muted else "Audio unmuted")

    def cleanup(self) -> None:
        """Release mixer resources."""
        if self._initialized:
            pygame.mixer.quit()
            self._initialized = False
            logger.info("Mixer closed")


# Shared engine
_audio_engine: Optional[AudioEngine] = None


def get_audio_engine() -> AudioEngine:
    """Shared engine; call init() on it once at startup."""
    global _audio_engine
    if _audio_engine is None:
        _audio_engine = AudioEngine()
    return _audio_engine
