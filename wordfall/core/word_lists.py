"""Word lists for the reference level catalog, easiest first."""

LEVEL_1_WORDS = (
    "cat", "dog", "sun", "map", "red", "cup", "box", "hat",
    "run", "key", "pen", "bus",
)

LEVEL_2_WORDS = (
    "tree", "fish", "rain", "book", "lamp", "frog", "milk", "door",
    "star", "wind", "ship", "gold",
)

LEVEL_3_WORDS = (
    "apple", "river", "cloud", "tiger", "chair", "bread", "storm", "piano",
    "grass", "stone", "light", "music",
)

LEVEL_4_WORDS = (
    "garden", "window", "planet", "rocket", "forest", "silver", "bridge", "castle",
    "winter", "orange", "pencil", "dragon",
)

LEVEL_5_WORDS = (
    "elephant", "mountain", "keyboard", "sandwich", "triangle", "dinosaur",
    "umbrella", "hospital", "calendar", "lighthouse", "adventure", "butterfly",
)
