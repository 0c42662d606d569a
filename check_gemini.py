"""
Smoke script to verify the Gemini API key against the OpenSCAD pipeline
Run this before starting the backend to ensure everything works
"""

import asyncio
import os
import sys

from scad_backend.llm import GenerationFailure
from scad_backend.app.schemas.llm import SessionContext
from scad_backend.app.services.llm_service import generate_from_image, generate_from_text


async def check_gemini_api(image_path=None):
    print("Testing Gemini API integration...")

    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        print("ERROR: GEMINI_API_KEY not found in environment variables")
        print("Linux/Mac: export GEMINI_API_KEY=your_key_here")
        return False

    print(f"API Key found: {api_key[:10]}...{api_key[-4:]}")
    context = SessionContext(api_key=api_key)

    try:
        result = await generate_from_text("Make a 20mm cube with a 12mm sphere cut out of it", "", [], context)
        print(f"Explanation: {result.explanation}")
        print(f"Code:\n{result.code}")

        if image_path:
            print(f"Testing image request with {image_path}")
            result = await generate_from_image(image_path, result.code, [], context)
            print(f"Explanation: {result.explanation}")
            print(f"Code:\n{result.code}")
        return True

    except GenerationFailure as e:
        print(f"ERROR: {e.message}")
        print("Common issues:")
        print("- Invalid API key")
        print("- Network connection problems")
        print("- Gemini API quota exceeded")
        return False


if __name__ == "__main__":
    success = asyncio.run(check_gemini_api(sys.argv[1] if len(sys.argv) > 1 else None))

    if success:
        print("\nGemini API check successful! You can now start the backend.")
    else:
        print("\nGemini API check failed. Please fix the issues above.")
        sys.exit(1)
