from __future__ import annotations

from .builder import CodeBuilder
from .common import AUTOGEN_DISCLAIMER
from .options import RenderOptions
from .schema import Command, FieldSpec, Schema
from .typemap import from_dynamic

VALUE_MACROS = (
    ("CPP_STR", "((x).As<Napi::String>().Utf8Value())"),
    ("CPP_INT", "((x).As<Napi::Number>().Int32Value())"),
    ("CPP_BOOL", "((x).As<Napi::Boolean>().Value())"),
)

HANDLE_COMMAND = """\
inline auto isNullish (Napi::Value value) -> bool {
  return value.IsNull() || value.IsUndefined();
}

template <typename Cmd>
inline auto handleCommand (Napi::Env env, const Cmd &cmd)
  -> Napi::Value {
  try {
    auto resp = run(cmd);
    if (auto err = resp.error()) {
      auto error = Napi::Error::New(env, err->what());
      error.ThrowAsJavaScriptException();
      return {};
    }
    Napi::Value res;
    resp.result().visit([&env, &res] (const auto &resp) {
      res = response::toJsObject(env, resp);
    });
    return res;
  } catch (const Exception &e) {
    auto error = Napi::Error::New(env, e.what());
    error.ThrowAsJavaScriptException();
    return {};
  }
}"""


def value_expr(spec: FieldSpec) -> str:
    # Keyed by field name, not flag, so the object shape matches the XOptions interfaces.
    return f'args.Get("{spec.name}")'


def render_array_field(builder: CodeBuilder, spec: FieldSpec) -> None:
    with builder.block("{"):
        builder.line(f"auto array = {value_expr(spec)}.As<Napi::Array>();")
        builder.line(f"cmd.{spec.name}.clear();")
        builder.line(f"cmd.{spec.name}.reserve(array.Length());")
        with builder.block("for (uint32_t i = 0; i < array.Length(); ++i) {"):
            builder.line(f"cmd.{spec.name}.push_back({from_dynamic(spec.type, 'array.Get(i)')});")


def render_field(builder: CodeBuilder, spec: FieldSpec) -> None:
    if spec.may_be_omitted:
        with builder.block(f"if (!isNullish({value_expr(spec)})) {{"):
            if spec.array:
                render_array_field(builder, spec)
            else:
                builder.line(f"cmd.{spec.name} = {from_dynamic(spec.type, value_expr(spec))};")
        return
    if spec.array:
        render_array_field(builder, spec)
    else:
        builder.line(f"cmd.{spec.name} = {from_dynamic(spec.type, value_expr(spec))};")


def render_bridge_function(builder: CodeBuilder, command: Command) -> None:
    builder.line(f"auto node{command.class_name} (const Napi::CallbackInfo &info)")
    with builder.block("  -> Napi::Value {"):
        builder.line(f"{command.class_name} cmd;")
        if command.has_fields:
            builder.line("auto args = info[0].ToObject();")
            for _, spec in command.fields:
                render_field(builder, spec)
        builder.line("return handleCommand(info.Env(), cmd);")


def render_registration(builder: CodeBuilder, schema: Schema) -> None:
    builder.line("auto init (Napi::Env env, Napi::Object exports)")
    with builder.block("  -> Napi::Object {"):
        for command in schema:
            builder.line(
                f'exports["{command.export_name}"] = Napi::Function::New(env, node{command.class_name});'
            )
        builder.line("return exports;")


def render_node(schema: Schema, options: RenderOptions) -> str:
    builder = CodeBuilder()
    builder.line(AUTOGEN_DISCLAIMER)
    builder.blank()
    builder.line("#ifndef BUILD_NODEJS")
    builder.line('#error "This file only works in Node builds"')
    builder.line("#endif // BUILD_NODEJS")
    builder.blank()
    builder.line("#include <napi.h>")
    builder.blank()
    for include in ("exception.h", options.header_include, "response.h", "result.h", options.run_header_include, "vector.h"):
        builder.line(f'#include "{include}"')
    builder.blank()
    builder.line(f"namespace {options.namespace} {{")
    builder.blank()
    builder.lines(HANDLE_COMMAND.splitlines())
    builder.blank()
    for name, body in VALUE_MACROS:
        builder.line(f"#define {name}(x) {body}")
    builder.blank()
    for command in schema:
        render_bridge_function(builder, command)
        builder.blank()
    for name, _ in VALUE_MACROS:
        builder.line(f"#undef {name}")
    builder.blank()
    render_registration(builder, schema)
    builder.blank()
    builder.line("NODE_API_MODULE(NODE_GYP_MODULE_NAME, init)")
    builder.blank()
    builder.line(f"}} // namespace {options.namespace}")
    return builder.render()
