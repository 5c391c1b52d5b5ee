"""
Built-in content for the two voice games.

Phrase Rainbow: say the scene's phrase to complete it (juice fills up, the
plate or cup slides in). What's in the Box: say which gift to open.
Phrase variants are written the way a child is likely to say them; the
matcher normalizes case and punctuation.
"""

from .completion import Scene
from .playground import Gift, VoicePrompt
from .targets import TargetSpec

RAINBOW_SCENES = (
    Scene(
        id=1,
        variant="juice",
        prompt="Can I have more juice?",
        phrase_variants=(
            "can i have more juice",
            "can i get more juice",
            "may i have more juice",
            "may i get more juice",
            "need more juice",
            "more juice please",
            "i want more juice",
            "more juice",
        ),
    ),
    Scene(
        id=2,
        variant="hungry",
        prompt="I'm hungry.",
        phrase_variants=(
            "i'm hungry",
            "im hungry",
            "i am hungry",
            "i feel hungry",
            "can i have some food",
            "may i have a snack",
            "i need food",
        ),
    ),
    Scene(
        id=3,
        variant="thirsty",
        prompt="I'm thirsty.",
        phrase_variants=(
            "i'm thirsty",
            "im thirsty",
            "i am thirsty",
            "i feel thirsty",
            "can i have some water",
            "may i have a drink",
            "i need water",
        ),
    ),
)

GIFTS = (
    Gift(id="red", title="Red Ribbon", prize_label="Robot Pal"),
    Gift(id="blue", title="Blue Swirls", prize_label="Magic Wand"),
    Gift(id="polka", title="Polka Party", prize_label="Toy Boat"),
    Gift(id="green", title="Green Glow", prize_label="Toy Rocket"),
)

GIFT_PROMPTS = (
    VoicePrompt(
        id="red-box",
        label="Can you open the red box?",
        phrase_variants=(
            "can you open the red box",
            "open the red box",
            "open red box",
            "open the box that is red",
        ),
        target=TargetSpec.by_id("red"),
    ),
    VoicePrompt(
        id="blue-box",
        label="Can you open the blue box?",
        phrase_variants=(
            "can you open the blue box",
            "open the blue box",
            "open blue box",
            "open the box that is blue",
        ),
        target=TargetSpec.by_id("blue"),
    ),
    VoicePrompt(
        id="first-box",
        label="Can you open the first box?",
        phrase_variants=(
            "can you open the first box",
            "open the first box",
            "open first box",
            "open box number one",
        ),
        target=TargetSpec.first(),
    ),
    VoicePrompt(
        id="last-box",
        label="Can you open the last box?",
        phrase_variants=(
            "can you open the last box",
            "open the last box",
            "open last box",
            "open the final box",
        ),
        target=TargetSpec.last(),
    ),
    VoicePrompt(
        id="polka-box",
        label="Can you open the box with polka dots?",
        phrase_variants=(
            "can you open the polka dot box",
            "can you open the box with polka dots",
            "open the polka dot box",
            "open the box with polka dots",
            "open polka dot box",
            "open polka dots box",
            "open the spotty box",
        ),
        target=TargetSpec.by_id("polka"),
    ),
    VoicePrompt(
        id="green-box",
        label="Can you open the green box?",
        phrase_variants=(
            "can you open the green box",
            "open the green box",
            "open green box",
            "open the box that is green",
        ),
        target=TargetSpec.by_id("green"),
    ),
)
