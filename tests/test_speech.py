import json

import pytest

from moral_tales.model.options import Language, VoiceStyle
from moral_tales.utils.speech import Voice, language_code, select_voice, speech_player_html, voice_profile

VOICES = [
    Voice(name="Google UK English Male", lang="en-GB"),
    Voice(name="Microsoft Zira - English (United States) Female", lang="en-US"),
    Voice(name="Google español", lang="es-ES"),
    Voice(name="Paulina Female", lang="es-MX"),
    Voice(name="Thomas", lang="fr-FR"),
]


@pytest.mark.parametrize("language,code", [
    (Language.ENGLISH, "en-US"),
    (Language.BILINGUAL, "en-US"),
    (Language.HINDI, "hi-IN"),
    (Language.SPANISH, "es-ES"),
    (Language.FRENCH, "fr-FR"),
    (Language.GERMAN, "de-DE"),
    (Language.MANDARIN, "zh-CN"),
])
def test_language_code(language, code):
    assert language_code(language) == code


@pytest.mark.parametrize("style,pitch", [
    (VoiceStyle.CARTOON_GIRL, 1.0),
    (VoiceStyle.CARTOON_BOY, 1.0),
    (VoiceStyle.FAIRY, 1.5),
    (VoiceStyle.FRIENDLY_ANIMAL, 0.8),
])
def test_pitch_per_style(style, pitch):
    assert voice_profile(Language.ENGLISH, style).pitch == pytest.approx(pitch)


def test_girl_styles_prefer_female_voice():
    assert select_voice(VOICES, Language.ENGLISH, VoiceStyle.FAIRY).lang == "en-US"
    assert select_voice(VOICES, Language.SPANISH, VoiceStyle.CARTOON_GIRL).name == "Paulina Female"


def test_boy_styles_prefer_male_voice():
    assert select_voice(VOICES, Language.ENGLISH, VoiceStyle.CARTOON_BOY).name == "Google UK English Male"


def test_falls_back_to_first_voice_of_language():
    assert select_voice(VOICES, Language.FRENCH, VoiceStyle.CARTOON_GIRL).name == "Thomas"


def test_unknown_language_falls_back_to_english():
    assert select_voice(VOICES, Language.MANDARIN, VoiceStyle.CARTOON_BOY).lang.startswith("en")


def test_falls_back_to_any_voice_without_english():
    voices = [Voice(name="Anna", lang="de-DE")]
    assert select_voice(voices, Language.HINDI, VoiceStyle.FAIRY) == voices[0]


def test_no_voices():
    assert select_voice([], Language.ENGLISH, VoiceStyle.FAIRY) is None


def test_player_embeds_profile():
    html = speech_player_html("Once upon a time </script>", Language.HINDI, VoiceStyle.FRIENDLY_ANIMAL)

    start = html.index("const config = ") + len("const config = ")
    end = html.index(";\n", start)
    config = json.loads(html[start:end])
    assert config["langPrefix"] == "hi"
    assert config["nameHints"] == ["Male", "Boy"]
    assert config["pitch"] == pytest.approx(0.8)
    assert config["text"] == "Once upon a time </script>"
    assert "</script>\"" not in html


def test_player_script_follows_the_same_fallback_order():
    html = speech_player_html("Hi", Language.ENGLISH, VoiceStyle.CARTOON_GIRL)

    start = html.index("function pickVoice(voices) {")
    body = html[start:html.index("\n}\n", start)]
    steps = [
        "if (!voices.length) return null;",
        "v.lang.startsWith(config.langPrefix)",
        'voices.find(v => v.lang.startsWith("en")) || voices[0]',
        "config.nameHints.some(h => v.name.includes(h))) || preferred[0]",
    ]
    positions = [body.index(step) for step in steps]
    assert positions == sorted(positions)
