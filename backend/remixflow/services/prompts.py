AUDIO_DUBBING_PROMPT = (
    "Describe how you would translate this audio content to {language} language. "
    "The original audio is {filename}."
)

AUDIO_STYLE_TRANSFER_PROMPT = (
    "Describe how you would apply {style} style transfer to this audio content. "
    "The original audio is {filename}."
)

VIDEO_DUBBING_PROMPT = (
    "Create an image representing video dubbing from one language to {language}. "
    "Show a video frame with subtitles being translated."
)

VIDEO_STYLE_TRANSFER_PROMPT = (
    "Create an image showing a video frame with {style} style transfer applied. "
    "Show a before/after comparison of the style transformation."
)
