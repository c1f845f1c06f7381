from pydantic import BaseModel


class SuggestionResponse(BaseModel):
    suggestions: list[str]


class SessionSuggestionResponse(SuggestionResponse):
    superseded: bool = False  # a newer keystroke replaced this lookup before it finished
