"""
Interview Coach.

Generates interview preparation material for a job, a single skill or
general practice: likely questions, layered skill explanations and STAR
stories drawn from the candidate's resume.
"""

from langchain_core.language_models import BaseChatModel

from resume_tailor.agents.llm import analysis_step, invoke_json
from resume_tailor.agents.results import (
    InterviewContext,
    InterviewQuestion,
    SkillExplanation,
    SkillLevel,
    StarOutline,
    StarStory,
)
from resume_tailor.utils.parser import as_dict, as_dict_list, as_str, as_str_list, choice, pick

MAX_QUESTIONS = 12
MAX_SKILLS = 8
MAX_STORIES = 5

COACH_SYSTEM_PROMPT = (
    "You are a senior interviewer and career coach. Prepare candidates with realistic, "
    "role-specific material and practical answers."
)

QUESTIONS_PROMPT = """Prepare interview questions.

## Focus
{focus}

## Output Format (JSON object only)
- questions: array of up to 12 objects with
    - id: short unique id
    - question: the question
    - type: "technical" or "behavioral"
    - topic: topic area
    - difficulty: "junior", "mid" or "senior"
    - suggested_answer: a strong answer outline
    - star: for behavioral questions, object with situation, task, action, result
"""

SKILLS_PROMPT = """Explain these skills the way a candidate should in an interview.

## Skills
{skills}

## Focus
{focus}

## Output Format (JSON object only)
- skills: array of up to 8 objects with
    - skill: the skill name
    - levels: array of objects with label ("30s", "2min" or "deepDive") and text
    - pitfalls: common mistakes when discussing it
    - examples_from_resume: concrete examples the candidate could mention
"""

STORIES_PROMPT = """Write STAR stories from this resume.

## Resume
{resume_text}

## Focus
{focus}

## Output Format (JSON object only)
- stories: array of up to 5 objects with
    - id: short unique id
    - title: story title
    - skill: the skill it demonstrates
    - situation, task, action, result: the STAR parts
    - concise_version: a 30-second telling
    - extended_version: a 2-minute telling

## Rules
- Use only experience present in the resume; do not invent employers or results
"""


def describe_focus(context: InterviewContext) -> str:
    """Render the interview context for a prompt."""
    if context.mode == "job":
        lines = [f"Position: {context.job_title or 'Unknown'}", f"Company: {context.company or 'Unknown'}"]
        if context.job_description:
            lines.append(f"Job description:\n{context.job_description[:3000]}")
        return "\n".join(lines)
    if context.mode == "skill" and context.skills:
        return f"Deep practice on: {context.skills[0]}"
    if context.skills:
        return f"General preparation; most requested skills: {', '.join(context.skills[:10])}"
    return "General preparation for a technical role"


def _star(value) -> StarOutline | None:
    data = as_dict(value)
    if not data:
        return None
    return StarOutline(**{part: as_str(data.get(part)) for part in ("situation", "task", "action", "result")})


def normalize_questions(data: dict) -> list[InterviewQuestion]:
    questions = []
    for i, item in enumerate(as_dict_list(data.get("questions")), 1):
        question = as_str(item.get("question"))
        if not question:
            continue
        questions.append(
            InterviewQuestion(
                id=as_str(item.get("id")) or f"q{i}",
                question=question,
                type=choice(item.get("type"), ("technical", "behavioral"), "technical"),
                topic=as_str(item.get("topic")),
                difficulty=choice(item.get("difficulty"), ("junior", "mid", "senior"), "mid"),
                suggested_answer=as_str(pick(item, "suggested_answer", "suggestedAnswer")),
                star=_star(item.get("star")),
            )
        )
    return questions[:MAX_QUESTIONS]


def normalize_skill_explanations(data: dict) -> list[SkillExplanation]:
    explanations = []
    for item in as_dict_list(data.get("skills")):
        skill = as_str(item.get("skill"))
        if not skill:
            continue
        levels = [
            SkillLevel(label=choice(level.get("label"), ("30s", "2min", "deepDive"), "2min"), text=as_str(level.get("text")))
            for level in as_dict_list(item.get("levels"))
        ]
        explanations.append(
            SkillExplanation(
                skill=skill,
                levels=levels,
                pitfalls=as_str_list(item.get("pitfalls")),
                examples_from_resume=as_str_list(pick(item, "examples_from_resume", "examplesFromResume")),
            )
        )
    return explanations[:MAX_SKILLS]


def normalize_star_stories(data: dict) -> list[StarStory]:
    stories = []
    for i, item in enumerate(as_dict_list(pick(data, "stories", "starStories")), 1):
        stories.append(
            StarStory(
                id=as_str(item.get("id")) or f"story{i}",
                title=as_str(item.get("title")),
                skill=as_str(item.get("skill")),
                situation=as_str(item.get("situation")),
                task=as_str(item.get("task")),
                action=as_str(item.get("action")),
                result=as_str(item.get("result")),
                concise_version=as_str(pick(item, "concise_version", "conciseVersion")),
                extended_version=as_str(pick(item, "extended_version", "extendedVersion")),
            )
        )
    return stories[:MAX_STORIES]


def generate_interview_questions(
    context: InterviewContext, llm: BaseChatModel | None = None
) -> list[InterviewQuestion]:
    with analysis_step("generate interview questions"):
        data = invoke_json(COACH_SYSTEM_PROMPT, QUESTIONS_PROMPT.format(focus=describe_focus(context)), llm)
        return normalize_questions(data)


def explain_skills(
    skills: list[str], context: InterviewContext, llm: BaseChatModel | None = None
) -> list[SkillExplanation]:
    with analysis_step("explain skills"):
        prompt = SKILLS_PROMPT.format(
            skills="\n".join(f"- {skill}" for skill in skills[:MAX_SKILLS]) or "- (choose the core skills for this focus)",
            focus=describe_focus(context),
        )
        data = invoke_json(COACH_SYSTEM_PROMPT, prompt, llm)
        return normalize_skill_explanations(data)


def generate_star_stories(
    resume_text: str, context: InterviewContext, llm: BaseChatModel | None = None
) -> list[StarStory]:
    with analysis_step("generate STAR stories"):
        prompt = STORIES_PROMPT.format(resume_text=resume_text, focus=describe_focus(context))
        data = invoke_json(COACH_SYSTEM_PROMPT, prompt, llm)
        return normalize_star_stories(data)
