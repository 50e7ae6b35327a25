"""
Whiteboard Prompts

This module contains the generation prompts for the three kinds of
whiteboard content produced by the completion service: mind maps,
sticky notes and flow diagrams.

Every prompt names each JSON field the parsers read and ends with the
"Return ONLY the JSON" directive. The parsers still tolerate prose and
code fences around the JSON.

Placeholders: {topic}, {context}, {count}, {palette}, {language_name}.
"""

# ============================================================================
# MIND MAP
# ============================================================================

MIND_MAP_GENERATION_EN = """Generate a mind map structure for the topic: "{topic}"
{context}
Return a JSON object with this exact structure:
{{
  "centerTopic": "Main Topic",
  "branches": [
    {{
      "text": "Branch 1",
      "color": "blue",
      "children": [
        {{ "text": "Sub-item 1" }},
        {{ "text": "Sub-item 2" }}
      ]
    }},
    {{
      "text": "Branch 2",
      "color": "green",
      "children": []
    }}
  ]
}}

Rules:
- Create 4-6 main branches
- Each branch can have 2-4 children
- Use colors: {palette}
- Keep text concise (max 50 characters per item)
- Write all text in {language_name}
- Make it relevant and actionable
- Return ONLY the JSON, no other text"""

# ============================================================================
# STICKY NOTES
# ============================================================================

STICKY_NOTES_GENERATION_EN = """Generate {count} sticky notes (post-its) for the topic: "{topic}"
{context}
Return a JSON array with this exact structure:
[
  {{ "text": "First idea or point", "color": "yellow" }},
  {{ "text": "Second idea or point", "color": "blue" }}
]

Rules:
- Generate exactly {count} sticky notes
- Use colors: {palette}
- Keep text concise (max 100 characters per note)
- Write all text in {language_name}
- Make each note a distinct, actionable idea
- Vary the colors for visual appeal
- Return ONLY the JSON array, no other text"""

# ============================================================================
# FLOW DIAGRAM
# ============================================================================

FLOW_DIAGRAM_GENERATION_EN = """Generate a flow diagram for the process: "{topic}"
{context}
Return a JSON object with this exact structure:
{{
  "nodes": [
    {{ "id": "start", "text": "Start", "type": "start" }},
    {{ "id": "step1", "text": "First Step", "type": "process" }},
    {{ "id": "decision1", "text": "Decision?", "type": "decision" }},
    {{ "id": "end", "text": "End", "type": "end" }}
  ],
  "connections": [
    {{ "from": "start", "to": "step1" }},
    {{ "from": "step1", "to": "decision1" }},
    {{ "from": "decision1", "to": "end", "label": "Yes" }}
  ]
}}

Node types:
- "start": Starting point (oval)
- "end": End point (oval)
- "process": Process step (rectangle)
- "decision": Decision point (diamond)

Rules:
- Create 5-8 nodes for a clear flow
- List nodes in reading order, from start to end
- Every "from" and "to" must be the id of a node in "nodes"
- Include at least one decision point if appropriate
- Connection labels are optional (for decisions)
- Keep text concise (max 40 characters per node)
- Write all text in {language_name}
- Return ONLY the JSON, no other text"""

# ============================================================================
# PROMPT REGISTRY
# ============================================================================

WHITEBOARD_PROMPTS = {
    # Format: diagram_type_prompt_type_language
    "mind_map_generation_en": MIND_MAP_GENERATION_EN,
    "sticky_notes_generation_en": STICKY_NOTES_GENERATION_EN,
    "flow_diagram_generation_en": FLOW_DIAGRAM_GENERATION_EN,
}
