"""Prompt construction for AI job scoring.

Both the resume and every job description pass through scrub_pii() here,
so nothing that leaves the process through a prompt carries emails, phone
numbers or SSN-like sequences.
"""

import json
from typing import Any, Dict, List, Sequence

from jobmatch.domain.models import CanonicalJob, SearchProfile
from jobmatch.privacy.pii import scrub_pii
from jobmatch.utils.text import truncate_text

TRUNCATION_MARKER = "...[truncated]"

SYSTEM_PROMPT = """You are a job matching assistant. Evaluate how well each job listing fits the candidate's profile, preferences and priorities.

SCORING GUIDELINES:
- Score each job from 0 to 100:
  - 0-20: very poor match, major misalignment or a deal-breaker is present
  - 21-40: weak match, several significant gaps
  - 41-60: moderate match, partial alignment with notable gaps
  - 61-80: good match, strong alignment with minor gaps
  - 81-100: excellent match, strong alignment across most or all criteria
- Weigh these factors, most important first:
  1. Deal-breakers: if a job triggers ANY deal-breaker, the score must not exceed 25
  2. Skill and keyword alignment with the candidate's resume
  3. Location and remote preference
  4. Salary expectations, when salary information is available
  5. Overall relevance of the role to the candidate's experience

BIAS MITIGATION:
- Do NOT let company prestige, brand recognition or company size affect the score.
  An identical role at an unknown startup and at a large enterprise must score the same.
- Do NOT reward or penalize an industry unless the candidate states an industry
  preference or deal-breaker.
- Do NOT infer demographic information about the candidate, and do not use perceived
  demographic characteristics in scoring.
- Judge each job only on the candidate's stated criteria: skills, keywords, location,
  salary and deal-breakers.
- If a description contains gendered, age-biased or otherwise exclusionary language,
  mention it in the reasoning without raising or lowering the score for it.

RESPONSE FORMAT:
Respond ONLY with a JSON array, without markdown fences or any text outside the JSON.
Each element must have exactly these keys:
- "externalId": the job's externalId (string)
- "score": integer 0-100
- "reasoning": a 1-3 sentence explanation of the score"""


def build_system_prompt() -> str:
    return SYSTEM_PROMPT


def scoring_key(job: CanonicalJob) -> str:
    """Batch-local id sent as "externalId"; provider ids are only unique within a source."""
    return f"{job.source.value}:{job.external_id}"


def prepare_job(job: CanonicalJob, max_description_chars: int = 2000) -> Dict[str, Any]:
    """Project a job onto the fields sent to the AI service.

    The description is scrubbed before truncation; truncating first could
    cut an email or phone number into a fragment the patterns miss.
    """
    description = truncate_text(
        scrub_pii(job.description),
        max_description_chars,
        suffix=TRUNCATION_MARKER,
    )

    return {
        "externalId": scoring_key(job),
        "title": job.title,
        "company": job.company,
        "location": job.location,
        "description": description,
        "salary": job.salary,
        "remote": job.remote,
        "postedAt": job.posted_at,
    }


def _format_list(values: Sequence[str], empty: str) -> str:
    return ", ".join(values) if values else empty


def build_user_prompt(prepared_jobs: List[Dict[str, Any]], profile: SearchProfile) -> str:
    """Build the per-batch prompt: candidate summary followed by the jobs as JSON."""
    if profile.min_salary is not None:
        min_salary = f"${profile.min_salary:,}"
    else:
        min_salary = "Not specified"

    lines = [
        "CANDIDATE PROFILE:",
        f"Resume summary: {scrub_pii(profile.resume_text)}",
        f"Keywords / skills: {', '.join(profile.keywords)}",
        f"Preferred locations: {_format_list(profile.preferred_locations, 'No preference')}",
        f"Remote preference: {profile.remote_preference.value}",
        f"Minimum salary: {min_salary}",
        f"Deal-breakers: {_format_list(profile.deal_breakers, 'None specified')}",
        "",
        f"JOBS TO SCORE ({len(prepared_jobs)}):",
        json.dumps(prepared_jobs, indent=2, ensure_ascii=False),
        "",
        "Score each job against the candidate profile above. "
        "Return a JSON array with one entry per job.",
    ]
    return "\n".join(lines)
