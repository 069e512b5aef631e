from moral_tales.model.story import StoryRequest

STORY_PROMPT_TEMPLATE = """
You are a world-class, creative, and kid-friendly story writer.
Your task is to create a short, engaging moral story for children (ages 3-7).
**Instructions:**
1.  Write a story based on the provided topic and language.
2.  The story must be simple, cheerful, and under 800 words.
3.  Break the story into {length} key chronological scenes.
4.  For EACH scene, provide:
    a) A "paragraph" for the story.
    b) A concise, visually rich, one-sentence "imagePrompt" for an illustration. Focus on concrete visual elements (e.g., "A small, fluffy bunny hops through a field of bright yellow flowers.").
5.  Ensure all content is child-safe and positive.
**Story Details:**
-   **Topic/Moral:** {topic}
-   **Language:** {language}
**Output Format:**
Your output MUST be a valid JSON array of objects.
"""

ILLUSTRATION_PROMPT_TEMPLATE = (
    "A cute and vibrant children's book illustration of {scene}. "
    "Whimsical, colorful, friendly, storybook style, high quality."
)


def build_story_prompt(request: StoryRequest) -> str:
    return STORY_PROMPT_TEMPLATE.format(
        length=request.length,
        topic=request.topic.value,
        language=request.language.value,
    ).strip()


def build_illustration_prompt(image_prompt: str) -> str:
    scene = image_prompt.strip().rstrip(".")
    return ILLUSTRATION_PROMPT_TEMPLATE.format(scene=scene)
