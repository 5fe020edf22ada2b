"""
Onboarding option catalog

Goal options and the goal -> guides / goal -> pillars recommendations, plus
the fixed option lists offered on the pacing, pillars and writing-format steps.
"""

from typing import Dict, List, Optional, Sequence, Tuple

GOAL_OPTIONS = [
    'Build Authority',
    'Grow Network',
    'Attract Clients',
    'Share Ideas',
    'Attract Opportunities',
    'Stay Visible',
    'Stay Relevant',
    'Become a Thought Leader',
]

# 3 guides per goal
GOAL_TO_GUIDES: Dict[str, List[str]] = {
    'Build Authority': [
        'Share your expertise consistently',
        'Back claims with evidence and experience',
        'Position yourself as a reliable source',
    ],
    'Grow Network': [
        'Engage authentically with others',
        'Share valuable insights regularly',
        'Be generous with connections and introductions',
    ],
    'Attract Clients': [
        'Showcase your work and results',
        'Address common client pain points',
        'Demonstrate your unique value proposition',
    ],
    'Share Ideas': [
        'Be authentic and original',
        'Make complex topics accessible',
        'Encourage discussion and feedback',
    ],
    'Attract Opportunities': [
        'Highlight your skills and achievements',
        'Share your vision and aspirations',
        'Network strategically and purposefully',
    ],
    'Stay Visible': [
        'Post consistently and regularly',
        'Engage with trending topics in your field',
        'Share behind-the-scenes content',
    ],
    'Stay Relevant': [
        'Keep up with industry trends',
        'Share timely insights and commentary',
        'Adapt your content to current events',
    ],
    'Become a Thought Leader': [
        'Share unique perspectives and opinions',
        'Start conversations on important topics',
        'Challenge conventional thinking respectfully',
    ],
}

ALL_PILLAR_OPTIONS = [
    'Industry Insights', 'Personal Stories', 'Tips & Advice', 'Behind the Scenes',
    'Team & Culture', 'Product Updates', 'Thought Leadership', 'Educational Content',
    'Company News', 'Customer Stories', 'Market Analysis', 'Case Studies',
    'Best Practices', 'Innovation & Trends', 'Leadership Lessons', 'Career Development',
    'Networking Tips', 'Success Stories', 'Challenges & Solutions', 'Future Predictions',
    'Expert Interviews', 'Process Insights', 'Tool Recommendations', 'Industry Events',
    'Professional Growth', 'Skill Development', 'Strategic Thinking', 'Client Success',
    'Project Highlights', 'Lessons Learned',
]

# 3 pillars per goal
GOAL_TO_PILLARS: Dict[str, List[str]] = {
    'Build Authority': ['Thought Leadership', 'Industry Insights', 'Expert Interviews'],
    'Grow Network': ['Networking Tips', 'Personal Stories', 'Industry Events'],
    'Attract Clients': ['Case Studies', 'Customer Stories', 'Success Stories'],
    'Share Ideas': ['Innovation & Trends', 'Best Practices', 'Strategic Thinking'],
    'Attract Opportunities': ['Career Development', 'Professional Growth', 'Skill Development'],
    'Stay Visible': ['Behind the Scenes', 'Company News', 'Process Insights'],
    'Stay Relevant': ['Market Analysis', 'Future Predictions', 'Industry Insights'],
    'Become a Thought Leader': ['Thought Leadership', 'Leadership Lessons', 'Challenges & Solutions'],
}

DEFAULT_GUIDES = ['Be authentic', 'Share your experience', 'Avoid hype']
DEFAULT_PILLARS = ['Industry Insights', 'Personal Stories', 'Tips & Advice']

CONTENT_TYPE_OPTIONS = [
    'How-To',
    'News Opinions',
    'Personal Stories',
    'Career Lessons',
    'Behind the Scenes',
    'Client Stories',
    'Educational',
    'Memes & Humor',
]

# ============================================================================
# WRITING FORMATS
# ============================================================================

_SAMPLE_OPENING = "One thing we often miss: restarting a conversation with an AI assistant costs exactly the same as continuing to patch one that went off the rails."

WRITING_FORMATS: Dict[str, Dict[str, str]] = {
    'standard': {
        'label': 'Standard',
        'description': 'Flowing paragraphs, like a short essay.',
        'sample': (
            f"{_SAMPLE_OPENING} You already found the mistakes in the last attempt and know which line "
            "of reasoning failed. So why not start over with a sharper first prompt that carries those "
            "lessons? The result is cleaner, faster and often better."
        ),
    },
    'formatted': {
        'label': 'Formatted',
        'description': 'Short blocks with bullet points for easy scanning.',
        'sample': (
            f"{_SAMPLE_OPENING}\n\n"
            "• You started a task with the AI\n"
            "• The result was off\n"
            "• Now you're spending prompt after prompt fixing it\n\n"
            "Start over with a sharper prompt instead. The result is cleaner and faster."
        ),
    },
    'short': {
        'label': 'Short',
        'description': 'A few punchy lines, straight to the point.',
        'sample': (
            f"{_SAMPLE_OPENING}\n\n"
            "You already know what didn't work.\n\n"
            "Start over with a better prompt."
        ),
    },
    'emojis': {
        'label': 'Emojis',
        'description': 'Conversational, with emojis marking each idea.',
        'sample': (
            f"{_SAMPLE_OPENING} \U0001F914\n\n"
            "You already found the mistakes. ✅\n"
            "You already know which reasoning failed. \U0001F3AF\n\n"
            "Start over with a sharper prompt! \U0001F680"
        ),
    },
}
DEFAULT_WRITING_FORMAT = 'standard'

# ============================================================================
# WHATSAPP
# ============================================================================

DIAL_CODES: List[Tuple[str, str]] = [
    ('+55', 'Brazil (+55)'),
    ('+1', 'United States / Canada (+1)'),
    ('+44', 'United Kingdom (+44)'),
    ('+351', 'Portugal (+351)'),
    ('+34', 'Spain (+34)'),
    ('+49', 'Germany (+49)'),
    ('+33', 'France (+33)'),
    ('+52', 'Mexico (+52)'),
    ('+54', 'Argentina (+54)'),
    ('+91', 'India (+91)'),
]
DEFAULT_DIAL_CODE = '+55'

WHATSAPP_CONNECT_MESSAGE = "Hi! I want to connect my WhatsApp to Pacelane for personalized content suggestions."

# ============================================================================
# PACING
# ============================================================================

INTENSITY_OPTIONS = [
    '1 piece of content per week',
    '2-3 pieces of content per week',
    '4-5 pieces of content per week',
    'Daily content',
]

DAYS_OF_WEEK: List[Tuple[str, str]] = [
    ('mon', 'Monday'),
    ('tue', 'Tuesday'),
    ('wed', 'Wednesday'),
    ('thu', 'Thursday'),
    ('fri', 'Friday'),
    ('sat', 'Saturday'),
    ('sun', 'Sunday'),
]
DAY_IDS = [day_id for day_id, _ in DAYS_OF_WEEK]

DAILY_SUMMARY_TIMES = ['9:00 AM', '10:00 AM', '11:00 AM', '12:00 PM', '1:00 PM', '2:00 PM']
FOLLOWUP_FREQUENCIES = ['Daily', 'Weekly', 'Bi-weekly', 'Monthly']
RECOMMENDATION_TIMES = ['2:00 PM', '3:00 PM', '4:00 PM', '5:00 PM', '6:00 PM', '7:00 PM']
CONTEXT_SESSION_TIMES = ['5:00 PM', '6:00 PM', '7:00 PM', '8:00 PM', '9:00 PM', '10:00 PM']

PACING_DEFAULTS = {
    'intensity': '2-3 pieces of content per week',
    'frequency': [],
    'daily_summary_time': '9:00 AM',
    'followups_frequency': 'Daily',
    'recommendations_time': '2:00 PM',
    'context_sessions_time': '5:00 PM',
}


def _unique(items: Sequence[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def get_guides_for_goals(selected_goals: Optional[Sequence[str]]) -> List[str]:
    """Guides recommended for the selected goals (defaults when none selected)"""
    if not selected_goals:
        return list(DEFAULT_GUIDES)

    guides = []
    for goal in selected_goals:
        guides.extend(GOAL_TO_GUIDES.get(goal, []))
    return _unique(guides)


def get_pillars_for_goals(selected_goals: Optional[Sequence[str]]) -> List[str]:
    """Content pillars recommended for the selected goals (defaults when none selected)"""
    if not selected_goals:
        return list(DEFAULT_PILLARS)

    pillars = []
    for goal in selected_goals:
        pillars.extend(GOAL_TO_PILLARS.get(goal, []))
    return _unique(pillars)


def get_goal_preview_text(selected_goals: Optional[Sequence[str]]) -> str:
    if not selected_goals:
        return "Select goals to see personalized guides and content pillars."

    total_guides = len(get_guides_for_goals(selected_goals))
    total_pillars = len(get_pillars_for_goals(selected_goals))
    return (
        f"{total_guides} personalized guides and {total_pillars} content pillars "
        "will be suggested based on your goals."
    )
