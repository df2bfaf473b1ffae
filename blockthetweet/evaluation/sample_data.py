"""
Sample data generation for offline evaluation.
Generates a synthetic labeled tweet dataset: 1 = should be blocked, 0 = fine.
"""

import numpy as np
from typing import List, Tuple


ABUSIVE_PATTERNS = [
    "you are a worthless idiot",
    "shut up you stupid clown",
    "nobody wants you here loser",
    "go away you pathetic moron",
    "what a disgusting hateful person",
    "you are trash and everyone hates you",
    "stupid people like you ruin everything",
    "I hate you so much idiot",
]

BENIGN_PATTERNS = [
    "had a great time at the beach today",
    "thanks everyone for the birthday wishes",
    "just finished reading a wonderful book",
    "the coffee at this place is amazing",
    "looking forward to the weekend with friends",
    "congrats to the team on the win tonight",
    "new blog post is up check it out",
    "beautiful sunset over the city this evening",
]

# Noise that shows up in real tweets and rarely exists in the vocabulary
DECORATIONS = ["lol", "smh", "!!!", "#mondays", "@someone", "http://t.co/x1y2z3", "RT", "..."]


def generate_sample_texts(num_samples: int = 200, seed: int = 42) -> Tuple[List[str], List[int]]:
    """
    Generate synthetic tweet classification dataset.

    Args:
        num_samples: Number of samples to generate
        seed: Random seed for reproducibility

    Returns:
        Tuple of (texts, labels) where labels are 1 (block) or 0 (keep)
    """
    rng = np.random.default_rng(seed)

    texts = []
    labels = []
    for _ in range(num_samples):
        if rng.random() < 0.5:
            pattern = rng.choice(ABUSIVE_PATTERNS)
            label = 1
        else:
            pattern = rng.choice(BENIGN_PATTERNS)
            label = 0

        words = str(pattern).split()

        # Random capitalization exercises case folding
        if rng.random() < 0.3:
            words = [w.upper() if rng.random() < 0.3 else w.capitalize() for w in words]

        if rng.random() < 0.4:
            words.insert(int(rng.integers(0, len(words) + 1)), str(rng.choice(DECORATIONS)))

        texts.append(" ".join(words))
        labels.append(label)

    return texts, labels
