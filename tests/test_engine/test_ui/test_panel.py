import pytest
from unittest.mock import MagicMock, patch
from engine.ui.panel import DialoguePanel, RecordingPanel, PygamePanel

def test_panel_slots():
    panel = DialoguePanel()
    panel.show()
    panel.set_title("Ana", (255, 0, 0))
    panel.set_portrait("ana.png")
    panel.set_body("Hello")

    assert panel.visible
    assert panel.title == "Ana"
    assert panel.title_color == (255, 0, 0)
    assert panel.title_visible
    assert panel.portrait == "ana.png"
    assert panel.portrait_visible
    assert panel.body == "Hello"

    panel.hide_title()
    panel.hide_portrait()
    panel.hide()
    assert not panel.title_visible
    assert not panel.portrait_visible
    assert not panel.visible

def test_missing_slots_are_ignored():
    panel = DialoguePanel(has_title=False, has_portrait=False)
    panel.set_title("Ana", (255, 0, 0))
    panel.set_portrait("ana.png")
    panel.hide_title()
    panel.hide_portrait()

    assert panel.title is None
    assert not panel.title_visible
    assert panel.portrait is None
    assert not panel.portrait_visible

def test_recording_panel_keeps_history():
    panel = RecordingPanel()
    panel.set_body("")
    panel.set_body("H")
    panel.set_body("Hi")

    assert panel.body == "Hi"
    assert panel.body_history == ["", "H", "Hi"]

def test_pygame_panel_skips_drawing_when_hidden():
    panel = PygamePanel(rect=(0, 0, 200, 80))
    surface = MagicMock()

    with patch('pygame.draw.rect') as draw_rect:
        panel.draw(surface)

    draw_rect.assert_not_called()
    surface.blit.assert_not_called()

def test_pygame_panel_draws_title_and_body():
    panel = PygamePanel(rect=(0, 0, 200, 80), has_portrait=False)
    panel.show()
    panel.set_title("Ana", (255, 200, 80))
    panel.set_body("Hello\nthere")
    surface = MagicMock()
    font = MagicMock()
    font.get_linesize.return_value = 20

    with patch('pygame.draw.rect') as draw_rect, \
         patch('pygame.font.get_init', return_value=True), \
         patch('pygame.font.SysFont', return_value=font):
        panel.draw(surface)

    assert draw_rect.call_count == 2
    # Title plus two body lines
    assert surface.blit.call_count == 3
    font.render.assert_any_call("Ana", True, (255, 200, 80))
    font.render.assert_any_call("there", True, panel.text_color)

def test_pygame_panel_caches_missing_portrait():
    panel = PygamePanel(rect=(0, 0, 200, 80), portrait_base_path="does/not/exist")
    panel.set_portrait("nobody")

    assert panel._resolve_portrait() is None
    assert panel._portrait_cache == {"nobody": None}
