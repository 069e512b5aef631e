"""
Read-aloud support.

Speech itself is produced by the browser (``window.speechSynthesis``). This
module only decides which of the available voices to ask for, and how to
pitch it, from the selected language and voice style.
"""

import json
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from moral_tales.model.options import Language, VoiceStyle

DEFAULT_LANG_CODE = "en-US"

LANGUAGE_CODES = {
    Language.HINDI: "hi-IN",
    Language.SPANISH: "es-ES",
    Language.FRENCH: "fr-FR",
    Language.GERMAN: "de-DE",
    Language.MANDARIN: "zh-CN",
    Language.ENGLISH: "en-US",
    Language.BILINGUAL: "en-US",
}

FEMALE_HINTS = ("Female", "Girl")
MALE_HINTS = ("Male", "Boy")

NAME_HINTS = {
    VoiceStyle.CARTOON_GIRL: FEMALE_HINTS,
    VoiceStyle.FAIRY: FEMALE_HINTS,
    VoiceStyle.CARTOON_BOY: MALE_HINTS,
    VoiceStyle.FRIENDLY_ANIMAL: MALE_HINTS,
}

PITCHES = {
    VoiceStyle.FAIRY: 1.5,
    VoiceStyle.FRIENDLY_ANIMAL: 0.8,
}


@dataclass(frozen=True)
class Voice:
    name: str
    lang: str


@dataclass(frozen=True)
class VoiceProfile:
    lang_code: str
    name_hints: Tuple[str, ...]
    pitch: float = 1.0

    @property
    def lang_prefix(self) -> str:
        return self.lang_code[:2]


def language_code(language: Language) -> str:
    return LANGUAGE_CODES.get(Language(language), DEFAULT_LANG_CODE)


def voice_profile(language: Language, style: VoiceStyle) -> VoiceProfile:
    style = VoiceStyle(style)
    return VoiceProfile(
        lang_code=language_code(language),
        name_hints=NAME_HINTS.get(style, ()),
        pitch=PITCHES.get(style, 1.0),
    )


def select_voice(voices: Sequence[Voice], language: Language, style: VoiceStyle) -> Optional[Voice]:
    """
    Pick the best available voice for a language and style.

    Voices speaking the language come first; among them, one whose name hints
    at the style's gender wins. With no voice for the language, any English
    voice is used, then whatever voice exists.

    This is the reference policy. The browser cannot call back into Python, so
    ``pickVoice`` in the player script repeats the same steps against
    ``speechSynthesis.getVoices()``; change both together.
    """
    if not voices:
        return None
    profile = voice_profile(language, style)

    preferred = [v for v in voices if v.lang.startswith(profile.lang_prefix)]
    if not preferred:
        english = next((v for v in voices if v.lang.startswith("en")), None)
        return english or voices[0]

    for voice in preferred:
        if any(hint in voice.name for hint in profile.name_hints):
            return voice
    return preferred[0]


_PLAYER_TEMPLATE = """
<div style="font-family: sans-serif;">
  <button id="play" disabled
    style="border:none;border-radius:9999px;padding:8px 18px;background:#14B8A6;color:white;font-weight:700;cursor:pointer;">
    &#9654; Play story
  </button>
</div>
<script>
const config = __CONFIG__;
const synth = window.speechSynthesis;
const button = document.getElementById("play");
let playing = false;

function pickVoice(voices) {
  if (!voices.length) return null;
  const preferred = voices.filter(v => v.lang.startsWith(config.langPrefix));
  if (!preferred.length) return voices.find(v => v.lang.startsWith("en")) || voices[0];
  return preferred.find(v => config.nameHints.some(h => v.name.includes(h))) || preferred[0];
}

function setPlaying(value) {
  playing = value;
  button.innerHTML = value ? "&#10074;&#10074; Pause story" : "&#9654; Play story";
}

function refresh() {
  button.disabled = !config.text || synth.getVoices().length === 0;
}

button.addEventListener("click", () => {
  if (playing) { synth.cancel(); setPlaying(false); return; }
  synth.cancel();
  const utterance = new SpeechSynthesisUtterance(config.text);
  const voice = pickVoice(synth.getVoices());
  if (voice) {
    utterance.voice = voice;
    utterance.pitch = config.pitch;
  }
  utterance.onend = () => setPlaying(false);
  utterance.onerror = () => setPlaying(false);
  synth.speak(utterance);
  setPlaying(true);
});

synth.addEventListener("voiceschanged", refresh);
window.addEventListener("beforeunload", () => synth.cancel());
refresh();
</script>
"""


def speech_player_html(text: str, language: Language, style: VoiceStyle) -> str:
    """HTML snippet with a play/pause button reading ``text`` aloud in the browser."""
    profile = voice_profile(language, style)
    config = {
        "text": text,
        "langPrefix": profile.lang_prefix,
        "nameHints": list(profile.name_hints),
        "pitch": profile.pitch,
    }
    # keep "</script>" out of the inline JSON
    payload = json.dumps(config).replace("</", "<\\/")
    return _PLAYER_TEMPLATE.replace("__CONFIG__", payload)
