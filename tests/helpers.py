"""Test doubles shared across the suite."""

from amenity_translator.translation.clients.openai_client import CompletionResult, MODEL_ERROR


class ScriptedClient:
    """Completion client replaying canned responses in order.

    Each entry is a string (success), a CompletionResult, or a callable
    taking the prompt and returning either of those.
    """

    def __init__(self, responses=None, responder=None):
        self.responses = list(responses or [])
        self.responder = responder
        self.prompts = []
        self.calls = []

    def complete(self, prompt, temperature, max_tokens):
        self.prompts.append(prompt)
        self.calls.append((temperature, max_tokens))
        if self.responder is not None:
            response = self.responder(prompt)
        elif self.responses:
            response = self.responses.pop(0)
        else:
            return CompletionResult.failure(MODEL_ERROR, "script exhausted")
        if callable(response):
            response = response(prompt)
        if isinstance(response, CompletionResult):
            return response
        return CompletionResult.ok(response)


def is_translation_prompt(prompt):
    return "English phrases:" in prompt


def is_retranslation_prompt(prompt):
    return "ISSUES REPORTED BY THE REVIEWER" in prompt


def is_validation_prompt(prompt):
    return "VALIDATION CRITERIA" in prompt


def validation_response(score, issues="None", assessment="Excellent"):
    return (
        f"Score: {score}\n"
        f"Accuracy: {assessment}\n"
        f"Cultural: {assessment}\n"
        f"Natural: {assessment}\n"
        f"Technical: {assessment}\n"
        f"Issues: {issues}\n"
        f"Recommendation: Excellent"
    )
