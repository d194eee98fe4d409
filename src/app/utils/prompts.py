# File: src/app/utils/prompts.py
"""
Prompt templates for the AI endpoints.

Every builder returns a ``Prompt`` holding a fixed system instruction (role and
the JSON contract the reply must follow) and a user instruction assembled from
request fields and stored rows.
"""
import json
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str

    def messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


@dataclass(frozen=True)
class ComparisonExcerpt:
    """A sibling submission as shown to the model, labelled by position."""
    ordinal: int
    submission_id: str
    text: str

    @property
    def label(self) -> str:
        return f"Submission {self.ordinal}"


def build_quiz_prompt(topic: str, subject: str, count: int) -> Prompt:
    system = f"""You are an expert quiz creator for academic purposes. Generate {count} multiple-choice questions on the given topic.

Each question should:
- Be clear and unambiguous
- Have exactly 4 options (A, B, C, D)
- Have only one correct answer, copied verbatim from the options
- Cover different aspects of the topic
- Be progressively challenging
- Be appropriate for college-level students

Respond ONLY with valid JSON in this exact format:
{{
  "questions": [
    {{
      "question": "The question text",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correct_answer": "Option A",
      "points": 1
    }}
  ]
}}"""
    user = f"Subject: {subject}\nTopic: {topic}\n\nGenerate {count} multiple-choice quiz questions."
    return Prompt(system=system, user=user)


def build_assignments_prompt(syllabus: str, subject: str, count: int) -> Prompt:
    system = f"""You are an expert academic curriculum designer. Given a syllabus, generate {count} well-structured assignments that cover the key topics comprehensively.

Each assignment should:
- Have a clear, descriptive title
- Include detailed instructions/description for students
- Be progressively challenging
- Cover different topics from the syllabus
- Have an appropriate max score (between 50-100)

Respond ONLY with valid JSON in this exact format:
{{
  "assignments": [
    {{
      "title": "Assignment title",
      "description": "Detailed description and instructions for students",
      "max_score": 100
    }}
  ]
}}"""
    user = f"""Subject: {subject}

SYLLABUS CONTENT:
{syllabus}

Generate {count} assignments based on this syllabus."""
    return Prompt(system=system, user=user)


PLAGIARISM_SYSTEM = """You are an academic integrity analyzer. Your job is to:
1. Analyze the submitted text for potential plagiarism
2. Compare it against other submissions for the same assignment
3. Look for copied phrases, similar sentence structures, or paraphrased content
4. Evaluate the originality of the work

Be fair and accurate. Consider that some similarity is expected for the same assignment topic.
Only flag genuine concerns where text appears to be copied or minimally paraphrased."""


def build_plagiarism_prompt(
    text: str,
    comparisons: Sequence[ComparisonExcerpt],
    flag_threshold: float,
    assignment_title: Optional[str] = None,
    subject: Optional[str] = None,
) -> Prompt:
    if comparisons:
        joined = "\n\n".join(f"[{c.label}]: {c.text}" for c in comparisons)
        comparison_block = f"**Other submissions for comparison:**\n{joined}"
    else:
        comparison_block = "No other submissions to compare against."

    user = f"""Analyze this student submission for academic integrity:

**Assignment:** {assignment_title or "Unknown"}
**Subject:** {subject or "Unknown"}

**Submission to analyze:**
{text}

{comparison_block}

Provide your analysis in the following JSON format:
{{
  "similarity_percentage": <number 0-100>,
  "is_flagged": <boolean - true if similarity is above {flag_threshold:g}%>,
  "matched_submissions": [<numbers of the compared submissions with high similarity, e.g. 1, 3>],
  "analysis_details": "<detailed explanation of findings, specific phrases that match, and overall assessment>"
}}"""
    return Prompt(system=PLAGIARISM_SYSTEM, user=user)


def build_evaluation_prompt(
    title: str,
    description: str,
    subject: str,
    max_score: int,
    content: str,
) -> Prompt:
    system = f"""You are an expert academic evaluator. Your job is to evaluate student assignment submissions against the assignment instructions and requirements. Be thorough but fair in your assessment.

Evaluate the submission based on:
1. Does it follow the assignment instructions?
2. Is the content correct and accurate?
3. Is it complete and addresses all parts of the assignment?
4. Quality of explanation and understanding demonstrated

Always respond with valid JSON in this exact format:
{{
  "followsInstructions": true/false,
  "instructionScore": 0-100 (how well instructions were followed),
  "answerCorrectness": 0-100 (accuracy of the answers/content),
  "strengths": ["list of 2-4 specific strengths"],
  "improvements": ["list of 2-4 specific areas for improvement"],
  "detailedFeedback": "2-3 paragraph detailed feedback explaining the evaluation",
  "suggestedScore": 0-{max_score} (suggested score out of max)
}}"""
    user = f"""ASSIGNMENT DETAILS:
Title: {title}
Subject: {subject}
Instructions/Requirements: {description}
Maximum Score: {max_score}

STUDENT'S SUBMISSION:
{content}

Please evaluate this submission thoroughly and provide your assessment."""
    return Prompt(system=system, user=user)


LEARNING_PATH_SYSTEM = """You are an educational AI assistant that analyzes student performance and provides personalized learning recommendations. Based on the student's performance data, identify areas where they need improvement and suggest specific learning resources and strategies.

Always respond with valid JSON in this exact format:
{
  "performanceGaps": [
    {
      "subject": "Subject Name",
      "issue": "Brief description of the performance gap",
      "severity": "high" | "medium" | "low"
    }
  ],
  "recommendations": [
    {
      "subject": "Subject Name",
      "title": "Resource or Strategy Title",
      "description": "Brief description of what to do",
      "type": "video" | "practice" | "reading" | "tutorial" | "exercise",
      "priority": "high" | "medium" | "low",
      "estimatedTime": "e.g., 30 mins, 1 hour"
    }
  ],
  "encouragement": "A brief encouraging message for the student"
}"""


def build_learning_path_prompt(performance_summary: List[dict]) -> Prompt:
    user = f"""Analyze this student's performance and provide personalized learning recommendations:

{json.dumps(performance_summary, indent=2)}

Identify performance gaps (subjects with low scores or poor grades) and recommend specific resources to help improve. Focus on actionable recommendations."""
    return Prompt(system=LEARNING_PATH_SYSTEM, user=user)
