"""
services/templates.py — 언어별 기본 코드 템플릿과 출력 창 안내 문구
"""

DEFAULT_LANGUAGE = "cpp"

# 이 값으로 저장된 코드는 저장본이 없는 것으로 취급
BLANK_CODE_MARKER = "// WRITE YOUR CODE HERE"

OUTPUT_PLACEHOLDER = (
    'Click "Run Code" to execute your program...\n'
    "Use Ctrl+Enter as a shortcut to run code"
)

LANGUAGE_TEMPLATES = {
    "python": """# Write your Python code here
def main():
    pass


if __name__ == "__main__":
    main()
""",
    "cpp": """// Write your C++ code here
#include <iostream>
#include <string>
using namespace std;

int main() {

    return 0;
}""",
    "java": """// Write your Java code here
import java.util.Scanner;

public class Main {
    public static void main(String[] args) {

    }
}""",
    "html": """<!-- Write your HTML code here -->
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title></title>
</head>
<body>

</body>
</html>
""",
}

SUPPORTED_LANGUAGES = tuple(LANGUAGE_TEMPLATES)


def template_for(language: str) -> str:
    return LANGUAGE_TEMPLATES.get(language, LANGUAGE_TEMPLATES[DEFAULT_LANGUAGE])
