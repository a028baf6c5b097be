"""
Dialogue Demo

Demonstrates:
- Game loop driving the dialogue scheduler
- Input-triggered paragraphs (Z: fast-forward, then advance)
- Timer-triggered paragraphs
- Event-triggered paragraphs (press E to raise the trigger)
- A shared text speed (UP/DOWN change it while text prints)

Run: python -m demos.dialogue_demo
"""

import logging

import pygame

from dialogue import (
    DialogueManager,
    DialogueSequence,
    DialogueServices,
    EventAdvance,
    FloatVariable,
    InputAdvance,
    Paragraph,
    Speaker,
    TimerAdvance,
)
from engine.core import Game, GameConfig, GameEvent
from engine.input import InputEvent
from engine.ui import PygamePanel


def build_sequence(text_speed: FloatVariable, lever_pulled: GameEvent) -> DialogueSequence:
    guide = Speaker(name="Guide", name_color=(255, 210, 90))

    return DialogueSequence(
        name="demo",
        paragraphs=[
            Paragraph(
                text="Welcome! Press Z once to show all of this text at once.",
                print_rate=text_speed,
                speaker=guide,
                advance=InputAdvance(key=pygame.K_z),
            ),
            Paragraph(
                text="Press Z again to move on. This one advances on its own.",
                print_rate=text_speed,
                speaker=guide,
                advance=TimerAdvance(duration=1.5),
            ),
            Paragraph(
                text="Now pull the lever (press E).",
                print_rate=text_speed,
                advance=EventAdvance(trigger=lever_pulled),
            ),
            Paragraph(
                text="Done. Press Z to close the window.",
                print_rate=text_speed,
                speaker=guide,
                advance=InputAdvance(key=pygame.K_z),
            ),
        ],
        on_close=[lambda exhausted: logging.info("Demo dialogue closed, exhausted=%s", exhausted)],
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    game = Game(GameConfig(title="Dialogue Demo"))
    services = DialogueServices.from_game(game)

    def make_panel() -> PygamePanel:
        panel = PygamePanel(rect=(20, 540, 1240, 160), has_portrait=False)
        game.add_drawable(panel)
        return panel

    manager = DialogueManager(
        services,
        panel_factory=make_panel,
        on_panel_released=game.remove_drawable,
    )

    text_speed = FloatVariable(name="text_speed", value=30.0)
    lever_pulled = GameEvent("lever_pulled")

    def on_key(event) -> None:
        key = event["key"]
        if key == pygame.K_e:
            lever_pulled.raise_event()
        elif key == pygame.K_UP:
            text_speed.value = min(120.0, text_speed.value * 2)
        elif key == pygame.K_DOWN:
            text_speed.value = max(5.0, text_speed.value / 2)
        elif key == pygame.K_ESCAPE:
            game.quit()

    game.event_bus.subscribe(InputEvent.KEY_PRESSED, on_key)

    manager.play(build_sequence(text_speed, lever_pulled))
    game.run()


if __name__ == "__main__":
    main()
