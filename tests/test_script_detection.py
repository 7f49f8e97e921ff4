from backend.app.services.script_detection import (
    contains_target_script,
    detect_language,
    extract_latin_words,
    extract_target_script_words,
    is_mixed_script,
    is_target_language,
    target_script_percentage,
)


def test_plain_english_has_no_target_script():
    assert contains_target_script("Lagan mandap") is False
    assert target_script_percentage("Lagan mandap") == 0
    assert detect_language("Lagan mandap") == "english"


def test_pure_gujarati_is_target_language():
    text = "લગ્ન મંડપ"
    assert contains_target_script(text)
    assert is_target_language(text)
    assert detect_language(text) == "gujarati"


def test_containing_is_not_the_same_as_predominantly():
    text = "Stage with ખુરશી"
    assert contains_target_script(text)
    assert not is_target_language(text)
    assert detect_language(text) == "mixed"
    assert is_mixed_script(text)


def test_blank_text():
    assert contains_target_script("   ") is False
    assert target_script_percentage("") == 0
    assert detect_language(None) == "english"


def test_threshold_is_strictly_above_half():
    # 2 Gujarati characters out of 4
    assert target_script_percentage("કખab") == 50
    assert not is_target_language("કખab")


def test_extract_words_by_script():
    text = "Dom ડોમ 20x30 tent તંબુ"
    assert extract_latin_words(text) == ["Dom", "20x30", "tent"]
    assert extract_target_script_words(text) == ["ડોમ", "તંબુ"]
