"""Fixed narrative text shown during the result reveal."""

from photo_describe.domain.trivia import MadLibTrivia

WHY_BUTTON_LABEL = "WHY IS IT WOKE?"
WHY_TEXT = 'It\'s actually not MY job to "do the work" for you'
HOW_BUTTON_LABEL = 'HOW DO I "DO THE WORK?"'
NO_DESCRIPTION_TEXT = "No description available."

_UNKNOWN = "something you've never heard of"

_TEMPLATE = (
    "{description}\n\n"
    "To do the work, start by listening to {music}. "
    "Then watch {film} and binge {tv_show}. "
    "Read {fiction} for fun and {non_fiction} for homework. "
    "On your commute, queue up {podcast}. "
    "Finally, make a pilgrimage to {architecture} "
    "and meditate in front of {visual_art}."
)


def render_mad_lib(description: str | None, trivia: MadLibTrivia) -> str:
    """Interpolate the description and trivia rows into the narrative."""
    return _TEMPLATE.format(
        description=description or NO_DESCRIPTION_TEXT,
        music=(
            f'"{trivia.music.title}" by {trivia.music.artist} ({trivia.music.year})'
            if trivia.music
            else _UNKNOWN
        ),
        film=(
            f"{trivia.films.title} ({trivia.films.year}, "
            f"rated {trivia.films.mpaa_rating})"
            if trivia.films
            else _UNKNOWN
        ),
        tv_show=(
            f"{trivia.tv_shows.title} on {trivia.tv_shows.network}"
            if trivia.tv_shows
            else _UNKNOWN
        ),
        fiction=(
            f"{trivia.fiction.title} by {trivia.fiction.author}"
            if trivia.fiction
            else _UNKNOWN
        ),
        non_fiction=(
            f"all {trivia.non_fiction.page_count} pages of "
            f"{trivia.non_fiction.title} by {trivia.non_fiction.author}"
            if trivia.non_fiction
            else _UNKNOWN
        ),
        podcast=(
            f"{trivia.podcasts.title} from {trivia.podcasts.podcast_network}"
            if trivia.podcasts
            else _UNKNOWN
        ),
        architecture=(
            f"{trivia.architecture.title} by {trivia.architecture.architect}"
            if trivia.architecture
            else _UNKNOWN
        ),
        visual_art=(
            f"{trivia.visual_art.title} by {trivia.visual_art.artist}"
            if trivia.visual_art
            else _UNKNOWN
        ),
    )
