from __future__ import annotations
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from eduvault.errors import Conflict
from eduvault.schemas.challenge import ChallengeCreate
from eduvault.services.challenges import create_challenge

log = structlog.get_logger()


def _challenge(slug, title, description, difficulty, language, starter_code, case, track, tags, blurb):
    stdin, expected = case
    return {
        "slug": slug,
        "title": title,
        "description": description,
        "difficulty": difficulty,
        "language": language,
        "track": track,
        "starter_code": starter_code,
        "tags": tags,
        "blurb": blurb,
        "authors": ["EduVault Team"],
        "test_cases": [{"input": stdin, "expected_output": expected}],
    }


# Starter catalog loaded by POST /admin/seed-catalog
CATALOG = [
    # javascript
    _challenge(
        "js-hello-world", "Hello World",
        '# Hello World\n\nWrite a function that returns the classic "Hello, World!" greeting.',
        "Easy", "javascript", 'function helloWorld() {\n  // Your code here\n  return "Hello, World!"\n}',
        ("", "Hello, World!"), "Basics", ["strings", "introduction"],
        'The classical introductory exercise. Just say "Hello, World!"',
    ),
    _challenge(
        "js-reverse-string", "Reverse String",
        "# Reverse String\n\nWrite a function that reverses a string.",
        "Easy", "javascript", "function reverseString(str) {\n  // Your code here\n}",
        ("hello", "olleh"), "Algorithms", ["strings", "algorithms"],
        "Reverse a string character by character",
    ),
    _challenge(
        "js-fizzbuzz", "FizzBuzz",
        '# FizzBuzz\n\nWrite a function that returns "Fizz", "Buzz", "FizzBuzz", or the number itself.',
        "Easy", "javascript", "function fizzBuzz(n) {\n  // Your code here\n}",
        ("3", "Fizz"), "Algorithms", ["logic", "conditionals"],
        "The classic FizzBuzz programming challenge",
    ),
    _challenge(
        "js-palindrome", "Palindrome Checker",
        "# Palindrome Checker\n\nCheck if a string is a palindrome.",
        "Easy", "javascript", "function isPalindrome(str) {\n  // Your code here\n}",
        ("racecar", "true"), "Algorithms", ["strings", "algorithms"],
        "Determine if a string is a palindrome",
    ),
    _challenge(
        "js-sum-array", "Sum Array",
        "# Sum Array\n\nCalculate the sum of all numbers in an array.",
        "Easy", "javascript", "function sumArray(arr) {\n  // Your code here\n}",
        ("[1, 2, 3]", "6"), "Arrays", ["arrays", "math"],
        "Calculate the sum of numbers in an array",
    ),
    # python
    _challenge(
        "py-hello-world", "Hello World (Python)",
        '# Hello World\n\nWrite a function that returns the classic "Hello, World!" greeting in Python.',
        "Easy", "python", 'def hello_world():\n    return "Hello, World!"',
        ("", "Hello, World!"), "Basics", ["strings", "introduction"],
        "The classical introductory exercise in Python.",
    ),
    _challenge(
        "py-reverse-string", "Reverse String (Python)",
        "# Reverse String\n\nWrite a function that reverses a string in Python.",
        "Easy", "python", "def reverse_string(s):\n    pass",
        ("hello", "olleh"), "Algorithms", ["strings", "algorithms"],
        "Reverse a string using Python slicing.",
    ),
    _challenge(
        "py-factorial", "Factorial (Python)",
        "# Factorial\n\nCalculate the factorial of a number using Python.",
        "Medium", "python", "def factorial(n):\n    pass",
        ("5", "120"), "Math", ["math", "recursion"],
        "Calculate the factorial of a number.",
    ),
    _challenge(
        "py-palindrome", "Palindrome Checker (Python)",
        "# Palindrome Checker\n\nCheck if a string is a palindrome in Python.",
        "Easy", "python", "def is_palindrome(s):\n    pass",
        ("racecar", "True"), "Algorithms", ["strings", "algorithms"],
        "Determine if a string is a palindrome.",
    ),
    # java
    _challenge(
        "java-hello-world", "Hello World (Java)",
        '# Hello World\n\nWrite a method that returns the classic "Hello, World!" greeting.',
        "Easy", "java",
        'public class Solution {\n    public static String helloWorld() {\n        return "Hello, World!";\n    }\n}',
        ("", "Hello, World!"), "Basics", ["strings", "introduction"],
        "The classic Hello World in Java.",
    ),
    _challenge(
        "java-add-two", "Add Two Numbers",
        "# Add Two Numbers\n\nWrite a method that adds two integers.",
        "Easy", "java",
        "public class Solution {\n    public static int add(int a, int b) {\n        return 0;\n    }\n}",
        ("1, 2", "3"), "Math", ["math", "basics"],
        "Add two integers in Java.",
    ),
    _challenge(
        "java-max", "Find Maximum",
        "# Find Maximum\n\nFind the largest number in an array.",
        "Medium", "java",
        "public class Solution {\n    public static int findMax(int[] arr) {\n        return 0;\n    }\n}",
        ("[1, 5, 2]", "5"), "Arrays", ["arrays", "logic"],
        "Find the maximum value in an integer array.",
    ),
    _challenge(
        "java-is-even", "Is Even",
        "# Is Even\n\nCheck if a number is even.",
        "Easy", "java",
        "public class Solution {\n    public static boolean isEven(int n) {\n        return false;\n    }\n}",
        ("4", "true"), "Math", ["math", "conditionals"],
        "Determine if a number is even.",
    ),
    _challenge(
        "java-string-length", "String Length",
        "# String Length\n\nGet the length of a string.",
        "Easy", "java",
        "public class Solution {\n    public static int getLength(String s) {\n        return 0;\n    }\n}",
        ("Java", "4"), "Strings", ["strings", "basics"],
        "Return the length of a string.",
    ),
    # cpp
    _challenge(
        "cpp-hello-world", "Hello World (C++)",
        '# Hello World\n\nWrite a function that returns the classic "Hello, World!" greeting.',
        "Easy", "cpp", '#include <string>\nstd::string helloWorld() {\n    return "Hello, World!";\n}',
        ("", "Hello, World!"), "Basics", ["strings", "introduction"],
        "The classic Hello World in C++.",
    ),
    _challenge(
        "cpp-add", "Add Integers",
        "# Add Integers\n\nAdd two integers.",
        "Easy", "cpp", "int add(int a, int b) {\n    return 0;\n}",
        ("5, 3", "8"), "Math", ["math", "basics"],
        "Add two integers in C++.",
    ),
    _challenge(
        "cpp-multiply", "Multiply",
        "# Multiply\n\nMultiply two integers.",
        "Easy", "cpp", "int multiply(int a, int b) {\n    return 0;\n}",
        ("4, 2", "8"), "Math", ["math", "basics"],
        "Multiply two integers in C++.",
    ),
    _challenge(
        "cpp-is-positive", "Is Positive",
        "# Is Positive\n\nCheck if a number is positive.",
        "Easy", "cpp", "bool isPositive(int n) {\n    return false;\n}",
        ("5", "true"), "Logic", ["math", "conditionals"],
        "Check if a number is positive.",
    ),
    _challenge(
        "cpp-absolute", "Absolute Value",
        "# Absolute Value\n\nReturn the absolute value of an integer.",
        "Easy", "cpp", "int absolute(int n) {\n    return 0;\n}",
        ("-5", "5"), "Math", ["math", "basics"],
        "Calculate absolute value.",
    ),
]


async def seed_catalog(session: AsyncSession) -> tuple[list[str], list[str]]:
    """
    Load every catalog challenge whose slug is not taken yet.
    Returns (created, existing) slugs; a second run creates nothing.
    """
    created: list[str] = []
    existing: list[str] = []
    for item in CATALOG:
        try:
            await create_challenge(session, ChallengeCreate.model_validate(item))
        except Conflict:
            existing.append(item["slug"])
            continue
        created.append(item["slug"])
    log.info("catalog_seeded", created=len(created), existing=len(existing))
    return created, existing
