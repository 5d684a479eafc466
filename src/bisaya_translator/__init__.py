"""Extract English text from images with Gemini and translate it to Bisaya."""
