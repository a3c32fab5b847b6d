"""
AI Assistant Client

Any OpenAI-compatible chat completion endpoint works; the base URL and
model come from configuration.

AI is used ONLY for:
- meeting briefs (context from a person's record)
- content drafts (LinkedIn posts, articles, emails)
- career narratives (bio, summaries, pitch) from the workspace's career context
- chat about the user's career, grounded in the same context

Generated text is stored in MongoDB `ai_outputs`; the relational database
stays the source of truth for every career record.
"""
import logging
from typing import List, Optional

from openai import OpenAI

from careerhub.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

NARRATIVE_FORMATS = {
    "bio": "A professional bio of two or three paragraphs for a personal site or speaker page.",
    "linkedin_summary": "A LinkedIn About section in the first person, under 2600 characters.",
    "resume_summary": "A resume summary of three or four sentences built on strong action verbs.",
    "cover_letter_intro": "The opening paragraph of a cover letter that hooks the reader.",
    "elevator_pitch": "A 30-second spoken elevator pitch that sounds natural out loud.",
}

NARRATIVE_TONES = {
    "professional": "Keep the tone polished and objective.",
    "conversational": "Keep the tone friendly and personal.",
    "executive": "Keep the tone strategic, with the focus on leadership and business impact.",
}


class AIClient:
    """
    Thin wrapper over the chat completion API with one method per task.
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, model: Optional[str] = None):
        self.client = OpenAI(
            api_key=api_key or settings.openai_api_key,
            base_url=base_url or settings.openai_base_url,
        )
        self.model = model or settings.openai_model

    def _complete(self, messages: List[dict], max_tokens: int = 800) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=0.4
        )
        return (response.choices[0].message.content or "").strip()

    def _call_api(self, system_prompt: str, user_content: str, max_tokens: int = 800) -> str:
        """
        Internal method to call the chat API.
        Returns raw text response.
        """
        return self._complete([
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content}
        ], max_tokens=max_tokens)

    def meeting_brief(self, person: dict, interactions: List[dict], feedback: List[dict],
                      relationships: List[str]) -> str:
        """
        Prepare a short brief before meeting someone.
        """
        system_prompt = """You help a professional prepare for a meeting.
Write a concise brief in plain text with these parts:
1. Who they are (one or two sentences)
2. History together (key points from past interactions and feedback)
3. Suggested talking points (3 to 5 bullets)
Only use the facts provided. Do not invent details."""

        lines = [
            f"Name: {person['name']}",
            f"Company: {person.get('company') or 'unknown'}",
            f"Role: {person.get('role') or 'unknown'}",
            f"Relationship: {person.get('relationship_type') or 'unknown'}",
        ]
        if person.get("notes"):
            lines.append(f"Notes: {person['notes']}")
        if interactions:
            lines.append("Recent interactions:")
            for i in interactions:
                when = i.get("interaction_date") or "undated"
                lines.append(f"- {when} {i.get('interaction_type') or 'interaction'}: {i.get('notes') or ''}".rstrip())
        if feedback:
            lines.append("Feedback from them:")
            for f in feedback:
                lines.append(f"- {f['feedback_date']} {f.get('feedback_type') or ''}: {f['notes']}")
        if relationships:
            lines.append("Connections: " + "; ".join(relationships))

        return self._call_api(system_prompt, "\n".join(lines))

    def draft_content(self, content_type: str, topic: str, context_notes: Optional[str] = None) -> str:
        """
        Draft a piece of professional writing.
        """
        formats = {
            "linkedin_post": "a LinkedIn post of at most 200 words with a strong opening line",
            "article": "a short article of 400 to 600 words with a title and section headings",
            "email": "a professional email with a subject line, under 200 words",
        }
        system_prompt = (
            f"You are a writing assistant for a professional. Write {formats[content_type]}. "
            "Keep the tone confident and specific. Return only the draft."
        )
        user_content = f"Topic: {topic}"
        if context_notes:
            user_content += f"\nContext: {context_notes}"

        max_tokens = 1200 if content_type == "article" else 500
        return self._call_api(system_prompt, user_content, max_tokens=max_tokens)

    def career_narrative(self, narrative_type: str, tone: str, career_context: str,
                         target_role: Optional[str] = None) -> str:
        """
        Write a first-person career narrative in Markdown.
        """
        instructions = [NARRATIVE_FORMATS[narrative_type], NARRATIVE_TONES[tone]]
        if target_role:
            instructions.append(f"Tailor it to the role of {target_role}, leading with the most relevant experience.")

        system_prompt = (
            "You are a career coach and copywriter. Write from the career data provided.\n"
            + "\n".join(f"- {line}" for line in instructions)
            + "\nDo not invent facts. If details are missing, generalize. Output Markdown only."
        )
        return self._call_api(system_prompt, f"Career data:\n{career_context}", max_tokens=900)

    def chat(self, message: str, history: List[dict], career_context: str) -> str:
        """
        Answer one chat turn. History is the earlier user and assistant turns, oldest first.
        """
        system_prompt = f"""You are a career assistant with access to the user's career records.
Answer questions about their history, skills and network, suggest resume and profile
improvements, point out skill gaps and help plan goals.
Be concise. Say so when something is not in the records.

Career records:
{career_context}"""
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend({"role": turn["role"], "content": turn["content"]} for turn in history)
        messages.append({"role": "user", "content": message})
        return self._complete(messages)

    def test_connection(self) -> bool:
        """Test if the AI endpoint is reachable"""
        try:
            response = self._call_api(
                "You are a test assistant.",
                "Reply with exactly: OK",
                max_tokens=10
            )
            return "OK" in response.upper()
        except Exception as e:
            logger.error("AI endpoint connection failed: %s", e)
            return False


def ai_configured() -> bool:
    return bool(settings.openai_api_key)


# Singleton instance
_ai_client: AIClient = None


def get_ai_client() -> AIClient:
    """Get or create the AI client (singleton pattern)"""
    global _ai_client
    if _ai_client is None:
        _ai_client = AIClient()
    return _ai_client
