import secrets


# Shared with the web client's emoji picker.
EMOJIS: tuple[str, ...] = (
    "👶", "🧸", "⭐", "💫", "🎈", "✨", "🌱",
    "🎀", "🎁", "🎃", "🐻", "🐰", "🐱", "🐶",
    "🦊", "🐼", "🐨", "🦁", "🐯", "🐸", "🌙",
    "☀️", "🌈", "☁️", "🌺", "🌻", "🌷", "🌹",
    "🌸", "🍎", "🍌", "🍓", "🍇", "🍉", "🍊",
    "🍋", "🍑", "🍒", "🥝", "🚀", "🎪", "🎨",
    "🎭", "🎧", "🎮", "🎯", "🎲", "🥑",
    "🌿", "🍀", "🍁", "🍄", "🌵", "🌴", "🌲",
)


def random_emoji() -> str:
    return secrets.choice(EMOJIS)
