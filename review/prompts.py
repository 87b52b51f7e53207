"""Prompt templates for the plagiarism analyzer."""

PLAGIARISM_PROMPT = """
You are an expert code reviewer for a coding interview platform. Your task is to analyze the following code submission and determine if it appears to be plagiarized or if the candidate is cheating.

Question Title: {title}
Question Description: {description}
Programming Language: {language}

Submitted Code:
```{language}
{code}
```

Please analyze this code and provide:
1. Is this code likely plagiarized or does it show signs of cheating? (Yes/No)
2. Confidence level in your assessment (0-100)
3. Reasoning for your assessment
4. If applicable, suggestions for the interviewer

Focus on these indicators of potential plagiarism:
- Code that's unnecessarily complex or advanced for the problem
- Solutions that use algorithms or approaches not typically known by candidates
- Unusual variable names or commenting styles
- Code that solves more than what was asked
- Patterns that match common online solutions for this problem

Provide your analysis in JSON format with the following structure exactly:
{{
  "isPlagiarized": boolean,
  "confidence": number,
  "reasoning": "string",
  "suggestions": "string"
}}

Make sure the response is valid JSON that can be parsed.
"""


def build_plagiarism_prompt(code: str, language: str, title: str, description: str) -> str:
    """
    Compose the plagiarism-check prompt.

    The submitted code is embedded verbatim.
    """
    return PLAGIARISM_PROMPT.format(
        title=title,
        description=description,
        language=language,
        code=code,
    ).strip()
