"""
Onboarding wizard steps

The wizard is a fixed, linear sequence of pages. Navigation only ever moves
one step forward or back.
"""

from typing import List, NamedTuple, Optional


class Step(NamedTuple):
    slug: str
    title: str
    description: str
    progress_label: str


STEPS: List[Step] = [
    Step('welcome', 'Welcome to Pacelane',
         'Your content co-pilot for LinkedIn. A few questions and we will tailor everything to you.',
         'Welcome'),
    Step('first-things-first', 'First things first',
         'Paste your LinkedIn profile URL or username so we can learn about your work.',
         'LinkedIn'),
    Step('whatsapp', 'Connect your WhatsApp',
         'We send summaries, follow-ups and content ideas straight to your WhatsApp.',
         'WhatsApp'),
    Step('profile-review', 'Review your profile',
         'This is what we found on LinkedIn. Fix anything that looks off.',
         'Profile'),
    Step('inspirations', 'Who inspires you?',
         'Add LinkedIn creators whose content you admire. We use them as style references.',
         'Inspirations'),
    Step('pacing', 'Set your pace',
         'How often do you want to publish, and when should we check in?',
         'Pacing'),
    Step('goals', 'What are your goals?',
         'Pick what you want LinkedIn to do for you and who you want to reach.',
         'Goals'),
    Step('guides', 'Your content guides',
         'Principles every post should follow. We suggested some based on your goals.',
         'Guides'),
    Step('pillars', 'Your content pillars',
         'The themes and formats you want to be known for.',
         'Pillars'),
    Step('writing-format', 'Pick a writing format',
         'Choose how your posts should look.',
         'Format'),
    Step('knowledge', 'Share your knowledge',
         'Upload documents or links that describe your work. They ground every suggestion.',
         'Knowledge'),
    Step('ready', "You're all set",
         'We will generate your first content suggestions right away.',
         'Ready'),
]

_INDEX = {step.slug: index for index, step in enumerate(STEPS)}

FIRST_STEP = STEPS[0].slug
LAST_STEP = STEPS[-1].slug


def get_step(slug: str) -> Step:
    """Raises KeyError for unknown slugs"""
    return STEPS[_INDEX[slug]]


def step_number(slug: str) -> int:
    """1-based position of the step"""
    return _INDEX[slug] + 1


def next_step(slug: str) -> Optional[str]:
    index = _INDEX[slug]
    if index + 1 < len(STEPS):
        return STEPS[index + 1].slug
    return None


def previous_step(slug: str) -> Optional[str]:
    index = _INDEX[slug]
    if index > 0:
        return STEPS[index - 1].slug
    return None


def progress_percent(slug: str) -> int:
    return round(step_number(slug) / len(STEPS) * 100)
