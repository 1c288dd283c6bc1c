import pytest

from generate_default_icon import Canvas


def test_drawing_requires_focus():
    canvas = Canvas(4)
    with pytest.raises(RuntimeError):
        canvas.draw
    with pytest.raises(RuntimeError):
        canvas.composite(canvas.image.copy())


def test_focus_is_released():
    canvas = Canvas(4)
    with canvas.focus() as c:
        assert c is canvas
        assert canvas.focused
        canvas.draw.point((1, 1), fill=(255, 0, 0, 255))
    assert not canvas.focused
    assert canvas.image.getpixel((1, 1)) == (255, 0, 0, 255)


def test_focus_released_on_error():
    canvas = Canvas(4)
    with pytest.raises(ValueError):
        with canvas.focus():
            raise ValueError("boom")
    assert not canvas.focused


def test_focus_is_not_reentrant():
    canvas = Canvas(4)
    with canvas.focus():
        with pytest.raises(RuntimeError):
            with canvas.focus():
                pass
        assert canvas.focused
