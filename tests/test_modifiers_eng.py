from tracery_engine.core.modifiers.eng import (
    ENG_MODIFIERS,
    a,
    capitalize,
    capitalize_all,
    ed,
    first_s,
    is_alnum,
    is_vowel,
    lowercase,
    s,
)


def test_is_vowel():
    for c in "aeiouAE":
        assert is_vowel(c)
    assert not is_vowel("y")
    assert not is_vowel("x")
    assert not is_vowel("")


def test_is_alnum():
    assert is_alnum("a")
    assert is_alnum("1")
    assert not is_alnum("!")
    assert not is_alnum(" ")


def test_capitalize():
    assert capitalize("hello") == "Hello"
    assert capitalize("") == ""


def test_capitalize_all():
    assert capitalize_all("hello world") == "Hello World"
    assert capitalize_all("rock-and-roll 4ever") == "Rock-And-Roll 4ever"
    assert capitalize_all("") == ""


def test_lowercase():
    assert lowercase("HELLO") == "hello"
    assert lowercase("") == ""


def test_a():
    assert a("cat") == "a cat"
    assert a("owl") == "an owl"
    assert a("unicorn") == "a unicorn"
    assert a("umbrella") == "an umbrella"
    assert a("") == "a "


def test_s():
    assert s("cat") == "cats"
    assert s("box") == "boxes"
    assert s("bush") == "bushes"
    assert s("pony") == "ponies"
    assert s("day") == "days"
    assert s("") == ""


def test_first_s():
    assert first_s("green goblin") == "greens goblin"
    assert first_s("cat") == "cats"
    assert first_s("") == ""


def test_ed():
    assert ed("walk") == "walked"
    assert ed("bake") == "baked"
    assert ed("cry") == "cried"
    assert ed("play") == "played"
    assert ed("") == "ed"


def test_registry_names():
    assert set(ENG_MODIFIERS) == {"capitalizeAll", "capitalize", "lowercase", "a", "s", "firstS", "ed"}
    assert ENG_MODIFIERS["firstS"]("red fox") == "reds fox"


def test_ed_vowel_y_takes_ed():
    assert ed("obey") == "obeyed"
    assert ed("enjoy") == "enjoyed"
