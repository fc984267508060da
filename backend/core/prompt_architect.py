# backend/core/prompt_architect.py

from typing import List, Dict

from models.session_models import PromptStyle, CreativityLevel, PromptExample


# ==========================================
# SUPER PROMPT STRUCTURE
# ==========================================
# The five labelled sections every super prompt must contain, in this order.
SECTION_MARKERS = [
    "[PERSONA]",
    "[CONTEXT]",
    "[TASKS]",
    "[CONSTRAINTS]",
    "[OUTPUT FORMAT]",
]

SYSTEM_INSTRUCTION = """
You are "Vertex Architect", an elite AI specialised in Prompt Engineering for Large Language Models,
with a specific focus on Google Gemini and Vertex AI.

YOUR GOAL:
Transform the user's simple, vague idea (which may include images or files) into a structured,
highly detailed "Super Prompt" optimised to get the best possible answers from an AI.

MANDATORY OUTPUT STRUCTURE:
Return ONLY the optimised prompt. It must strictly follow this structure, using the bracketed tags:

[PERSONA]
Define who the AI should be (e.g. Senior Specialist, Creative Consultant). Include tone of voice and level of expertise.

[CONTEXT]
Describe the scenario, the necessary background and why this task matters. If images were provided, incorporate your analysis of them here.

[TASKS]
A logical, detailed, step-by-step list of what the AI must do. Use action verbs.

[CONSTRAINTS]
What the AI must NOT do. Length limits, style limits, biases to avoid, etc.

[OUTPUT FORMAT]
How the answer must be presented (Markdown, Table, JSON, Code, etc.). Give an example if necessary.

STYLE GUIDELINES:
- If the style is CODING: focus on Clean Code, SOLID, error handling and documentation.
- If the style is SALES: focus on persuasion, mental triggers (AIDA, PAS) and copywriting.
- If the style is DATA: focus on precision, statistical methodology and visualisation.
- If the style is ACADEMIC: focus on rigour, citations, methodology and critical review.
- If the style is VERTEX_EXPERT: write a technical System Instruction for configuring agents.

Do not add any conversation, only deliver the final structured prompt.
"""

TEMPERATURE_BY_CREATIVITY = {
    CreativityLevel.LOW: 0.2,
    CreativityLevel.MEDIUM: 0.5,
    CreativityLevel.HIGH: 0.9,
}

CREATIVITY_GUIDANCE = {
    CreativityLevel.LOW: "Be precise and conservative. Prefer proven, literal instructions over novelty.",
    CreativityLevel.MEDIUM: "Balance precision with some originality in framing and examples.",
    CreativityLevel.HIGH: "Be bold and inventive in persona, framing and examples while keeping the structure.",
}

EXECUTION_TEMPERATURE = 0.7
TOP_P = 0.95

# Permissive thresholds for a professional authoring tool
SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_ONLY_HIGH"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_ONLY_HIGH"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_ONLY_HIGH"},
]

ATTACHMENT_NOTE = (
    "NOTE: The user attached files. Analyse the visual/textual content of the attachments "
    "and use them as the fundamental basis for building the Super Prompt."
)


def get_temperature(creativity) -> float:
    """Maps a creativity level (or anything that parses as one) to a sampling temperature."""
    return TEMPERATURE_BY_CREATIVITY[CreativityLevel.parse(creativity)]


def build_idea_prompt(idea: str, style: PromptStyle, creativity: CreativityLevel, attachment_count: int = 0) -> str:
    """Text part of the super-prompt request."""
    creativity = CreativityLevel.parse(creativity)
    style = PromptStyle.parse(style)
    note = ATTACHMENT_NOTE if attachment_count > 0 else ""

    return f"""
User Idea: "{idea}"
Desired Style: {style.value} ({style.name})
Creativity: {creativity.value}. {CREATIVITY_GUIDANCE[creativity]}

{note}

Generate the Super Prompt now.
""".strip()


def find_section_markers(text: str) -> List[str]:
    """Returns the section markers present in text, ordered by first appearance."""
    found = [(text.find(marker), marker) for marker in SECTION_MARKERS if marker in text]
    return [marker for _, marker in sorted(found)]


def has_complete_structure(text: str) -> bool:
    return find_section_markers(text) == SECTION_MARKERS


# ==========================================
# QUICK-START EXAMPLES
# ==========================================
PROMPT_EXAMPLES: List[Dict[str, str]] = [
    {"label": "💰 Sales Script", "text": "Write a persuasive cold-call script to sell management software to small businesses."},
    {"label": "🐍 Python API", "text": "Build a RESTful API in Python using FastAPI with JWT authentication and Swagger documentation."},
    {"label": "📊 Data Analysis", "text": "Act as a data scientist and draft a plan to analyse the churn rate of an e-commerce store."},
    {"label": "🚀 LinkedIn Posts", "text": "Write a series of 3 engaging LinkedIn posts about the future of AI at work."},
    {"label": "🎓 Academic Review", "text": "Act as a senior academic reviewer and critique the methodology of a hypothetical study on the impact of remote work on productivity."},
    {"label": "🤖 Vertex AI Agent", "text": "Write a robust System Instruction for a Customer Service Agent that always answers with empathy but never makes up information."},
    {"label": "🎨 AI Image", "text": "Act as a Midjourney/DALL-E specialist and write a detailed prompt for a photorealistic image of sustainable architecture in a rainforest, cinematic 8k lighting."},
    {"label": "📺 Advertising", "text": "Develop a creative script for a 30-second TV commercial launching a sneaker brand made from recycled ocean plastic, focused on emotion and visual impact."},
    {"label": "🎬 Video Script", "text": "Write an engaging script for a 10-minute YouTube video explaining the Fermi Paradox, using simple metaphors and a humorous tone for audience retention."},
]


def get_prompt_examples() -> List[PromptExample]:
    return [PromptExample(**example) for example in PROMPT_EXAMPLES]
