from coding_round_cbt.services.code_runner import has_input_statements, simulate_run
from coding_round_cbt.services.templates import template_for


def test_cpp_output_statements_are_echoed():
    code = '#include <cstdio>\nint main() {\n  cout << "Hello";\n  printf("%d", 42);\n}'
    lines = simulate_run(code, "cpp")
    assert "Output: Hello" in lines
    assert "Output: %d, 42" in lines


def test_cpp_template_has_no_output():
    lines = simulate_run(template_for("cpp"), "cpp")
    assert lines[-1] == "C++ code compiled successfully. No output statements found."
    assert not any(line.startswith("Warning") for line in lines)


def test_java_missing_structure_warns():
    lines = simulate_run('System.out.println("x");', "java")
    assert "Warning: Missing public class declaration" in lines
    assert "Warning: Missing main method" in lines
    assert "Output: x" in lines


def test_python_print_and_input():
    code = "name = input()\nprint('hi')"
    lines = simulate_run(code, "python")
    assert lines[1] == "Interactive input detected - program will request user input"
    assert lines[-1] == "hi"


def test_unknown_language_falls_back_to_cpp():
    assert simulate_run("", "rust")[0].startswith("C++")


def test_has_input_statements():
    assert has_input_statements("cin >> n;", "cpp")
    assert has_input_statements("Scanner sc = new Scanner(System.in);", "java")
    assert not has_input_statements("print(1)", "python")
    assert not has_input_statements("prompt()", "ruby")
