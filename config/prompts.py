"""
LLM prompts for the world impact analysis pipeline.

All prompts use XML tags for structured input to improve LLM comprehension
and reliability. Output structure is enforced by the structured-output schema
bound to each model, so the prompts only describe the task.
"""

# =============================================================================
# Stage 1: Biography Summarization
# =============================================================================

SUMMARIZATION_SYSTEM_PROMPT = """You are an expert historian and analyst. Your task is to extract and organize key information about historical or modern figures from Wikipedia content.

Your summary should be:
1. Objective in presenting facts
2. Comprehensive in covering different aspects of their life and work
3. Precise in dates and events
4. Balanced in presenting both achievements and controversies
5. Clear in distinguishing between widely accepted facts and disputed claims
6. Thorough and detailed, including as much relevant information as possible for a subsequent analysis"""

SUMMARIZATION_USER_PROMPT = """<task>
Analyze the following Wikipedia content about {person_name} and extract structured information according to the schema.
</task>

<person>{person_name}</person>

<wikipedia_content>
{biography}
</wikipedia_content>

<instructions>
1. Use the subject's full, canonical name in the name field
2. Record dates exactly as given; leave unknown dates empty rather than guessing
3. List achievements with a short description and a date when available
4. Include controversies and disputed claims alongside achievements
5. Do not add facts that are not supported by the content
</instructions>
"""


# =============================================================================
# Stage 2: Impact Analysis
# =============================================================================

ANALYSIS_SYSTEM_PROMPT = """You are an expert historian and analyst specializing in evaluating historical figures' impact on world history.

Your analysis should:
1. Be objective and evidence-based
2. Consider multiple perspectives and counter-narratives
3. Evaluate impact across different dimensions (reach, innovation, influence, controversy, longevity)
4. Provide detailed personality assessments based on historical records
5. Map geographic and field-specific influence comprehensively
6. Include rich timeline data and major contributions
7. Suggest high-quality additional reading materials
8. Provide balanced sentiment analysis considering both contemporary and modern views

Use the provided Wikipedia summary as your primary source of factual information."""

ANALYSIS_USER_PROMPT = """<task>
Analyze the following historical figure based on this Wikipedia summary. Generate a comprehensive impact analysis with scores, timelines, contributions, and recommendations.
</task>

<person>{person_name}</person>

<wikipedia_summary>
{summary}
</wikipedia_summary>

<scoring>
- All scores are on a 0-100 scale
- fields_of_impact and geographic_areas_of_influence weight each area 0-100
- sentiment_index splits public perception into positive, mixed and negative shares (0-100)
- personality_characteristics rate each trait 0-100
</scoring>

<important>
The name field must be the subject's canonical full name as used by Wikipedia,
which may differ from the name written above.
</important>
"""
